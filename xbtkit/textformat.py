"""HTML encoding of user text, link detection, whitespace trimming and BBCode."""

from __future__ import annotations

import re

from xbtkit.stream import read_until

_SPACE = " \t\n\v\f\r"
_URL_PREFIXES = ("ftp://", "http://", "https://", "mailto:")
_URL_STOP = frozenset(_SPACE + '"<>[]')
_FIELD_ESCAPES = {"\r": "", "&": "&amp;", "<": "&lt;"}
_SPACE_RUN = re.compile(r"[ \t\n\v\f\r]+")
_QUOTE_OPEN = "<blockquote class=bq>"


def _web_encode(text: str) -> str:
    return text.replace("&", "&amp;").replace('"', "&quot;").replace("<", "&lt;")


def _web_link(title: str, link: str) -> str:
    return f'<a href="{_web_encode(link)}">{_web_encode(title or link)}</a>'


def encode_field(text: str, add_br: bool = False) -> str:
    """Escape text for HTML and turn URLs into links."""
    out = []
    pos = 0
    size = len(text)
    while pos < size:
        head = text[pos:pos + 8].lower()
        if head.startswith(_URL_PREFIXES):
            end = pos
            while end < size and text[end] not in _URL_STOP:
                end += 1
            if text[end - 1] in "!,.?":
                end -= 1
            if text[end - 1] == ")":
                end -= 1
            url = text[pos:end]
            title = url[7:] if head.startswith("mailto:") else url
            out.append(_web_link(title, url))
            pos = end
            continue
        char = text[pos]
        if char == "\n":
            out.append("<br>" if add_br else " ")
        else:
            out.append(_FIELD_ESCAPES.get(char, char))
        pos += 1
    return "".join(out)


def encode_text(text: str, add_quote_class: bool) -> str:
    """Encode each line and end it with ``<br>``; quoted lines may get a span."""
    out = []
    while text:
        line, text = read_until(text, "\n")
        field = encode_field(line)
        if add_quote_class and line.startswith("> "):
            field = f"<span class=quote>{field}</span>"
        out.append(field + "<br>")
    return "".join(out)


def trim_field(text: str) -> str:
    """Strip the ends and collapse whitespace runs to one space."""
    return _SPACE_RUN.sub(" ", text.strip(_SPACE))


def trim_text(text: str) -> str:
    """Trim each line, drop blank ones and keep at most one blank line between paragraphs."""
    out = []
    pending_blank = False
    for raw in text.split("\n"):
        line = trim_field(raw)
        if not line:
            pending_blank = True
            continue
        if pending_blank and out:
            out.append("\n")
        pending_blank = False
        out.append(line + "\n")
    return "".join(out)


_SIMPLE_TAGS = {
    "b": "<b>",
    "/b": "</b>",
    "center": "<center>",
    "/center": "</center>",
    "/color": "</font>",
    "/font": "",
    "i": "",
    "/i": "",
    "img": "",
    "IMG": "",
    "/img": "",
    "/IMG": "",
    "q": _QUOTE_OPEN,
    "quote": _QUOTE_OPEN,
    "/q": "</blockquote>",
    "/quote": "</blockquote>",
    "s": "<s>",
    "/s": "</s>",
    "/size": "",
    "u": "<u>",
    "/u": "</u>",
    "/url": "",
}


def _quote(author: str) -> str:
    if not author:
        return _QUOTE_OPEN
    return f"{_QUOTE_OPEN}<b>{encode_field(author)} wrote:</b>"


_PREFIX_TAGS = (
    ("color=", lambda arg: f'<font color="{encode_field(arg)}">'),
    ("font=", lambda arg: ""),
    ("img=", lambda arg: encode_field(arg, True)),
    ("quote=", _quote),
    ("size=", lambda arg: ""),
    ("url=", lambda arg: encode_field(arg, True) + " "),
    ("video=", lambda arg: encode_field(arg, True) + " "),
)


def _render_tag(tag: str) -> str:
    if tag in _SIMPLE_TAGS:
        return _SIMPLE_TAGS[tag]
    for prefix, render in _PREFIX_TAGS:
        if tag.startswith(prefix):
            return render(tag[len(prefix):])
    return f"[{encode_field(tag)}]"


def bbformat(text: str) -> str:
    """Render BBCode markup as HTML."""
    out = []
    pos = 0
    while pos < len(text):
        if text[pos] != "[":
            end = text.find("[", pos)
            if end < 0:
                end = len(text)
            out.append(encode_field(text[pos:end], True))
            pos = end
            continue
        close = text.find("]", pos)
        if close < 0:
            out.append(encode_field(text[pos:], True))
            break
        out.append(_render_tag(text[pos + 1:close]))
        pos = close + 1
    return "".join(out)