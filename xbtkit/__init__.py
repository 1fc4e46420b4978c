"""Building blocks for BitTorrent tools: bencoding, SHA-1, tracker URLs and accounts, XIF containers, gzip, text formatting, settings and binary streams."""

__version__ = "0.1.0"