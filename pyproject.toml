[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xbtkit"
version = "0.1.0"
description = "Helpers for BitTorrent tools: bencoding, SHA-1, tracker URLs, XIF containers, text formatting and binary streams"
requires-python = ">=3.10"
keywords = ["bittorrent", "bencode", "tracker", "sha1", "xif", "bbcode", "gzip"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["xbtkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
