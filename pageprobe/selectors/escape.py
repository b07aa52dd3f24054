# pageprobe/selectors/escape.py
from __future__ import annotations

"""Query building helpers
-------------------------
Caller-supplied text (labels, link text, ids, page text) is embedded into
XPath and CSS only through these functions, never by plain formatting.
"""


# ---------- XPath ----------

def xpath_literal(text: str) -> str:
    """
    Return an XPath 1.0 string literal equal to `text`.

    XPath has no escape sequences, so a value holding both quote kinds is
    written as concat() of quoted pieces:
        it's "x"  ->  concat('it', "'", 's "x"')
    """
    if "'" not in text:
        return f"'{text}'"
    if '"' not in text:
        return f'"{text}"'
    items = []
    for i, part in enumerate(text.split("'")):
        if i:
            items.append('"\'"')
        if part:
            items.append(f"'{part}'")
    return "concat(" + ", ".join(items) + ")"


def normalize_space(text: str) -> str:
    """Caller-side twin of XPath normalize-space(): trim and collapse whitespace runs."""
    return " ".join(text.split())


def text_contains_xpath(text: str) -> str:
    """Any element whose string value contains `text`."""
    return f"//*[contains(., {xpath_literal(text)})]"


def link_text_xpath(text: str, *, partial: bool = False) -> str:
    """Anchors by normalized visible text, exact or substring."""
    lit = xpath_literal(normalize_space(text))
    if partial:
        return f"//a[contains(normalize-space(string(.)), {lit})]"
    return f"//a[normalize-space(string(.))={lit}]"


# ---------- CSS ----------

def _hex_escape(ch: str) -> str:
    return f"\\{ord(ch):x} "


def css_string(text: str) -> str:
    """Serialize `text` as a double-quoted CSS string (CSSOM rules)."""
    out = []
    for ch in text:
        code = ord(ch)
        if code == 0:
            out.append("\ufffd")
        elif 0x1 <= code <= 0x1F or code == 0x7F:
            out.append(_hex_escape(ch))
        elif ch in ('"', "\\"):
            out.append("\\" + ch)
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def css_identifier(text: str) -> str:
    """Escape `text` for use as a CSS identifier, e.g. a class name."""
    out = []
    for i, ch in enumerate(text):
        code = ord(ch)
        if code == 0:
            out.append("\ufffd")
        elif 0x1 <= code <= 0x1F or code == 0x7F:
            out.append(_hex_escape(ch))
        elif ch.isdigit() and ch.isascii() and (i == 0 or (i == 1 and text[0] == "-")):
            out.append(_hex_escape(ch))
        elif ch == "-" and len(text) == 1:
            out.append("\\-")
        elif code >= 0x80 or ch in "-_" or (ch.isascii() and ch.isalnum()):
            out.append(ch)
        else:
            out.append("\\" + ch)
    return "".join(out)


def css_attr_equals(attr: str, value: str) -> str:
    """`[attr="value"]` with the value escaped."""
    return f"[{attr}={css_string(value)}]"


__all__ = [
    "xpath_literal",
    "text_contains_xpath",
    "link_text_xpath",
    "css_string",
    "css_identifier",
    "css_attr_equals",
]
