from __future__ import annotations
import re

_resource_unsafe_re = re.compile(r"[^a-z0-9_]")

ESCAPE_MODES = ("gt", "full", "smf")

def sanitize_resource_name(name: str | None) -> str:
    """Lowercase, anything outside a-z 0-9 _ becomes '_', outer '_' trimmed."""
    if not name:
        return ""
    return _resource_unsafe_re.sub("_", name.lower()).strip("_")

def _unicode_escape(ch: str) -> str:
    cp = ord(ch)
    if cp > 0xFFFF:
        # astral code points go out as a UTF-16 surrogate pair
        cp -= 0x10000
        return "\\u%04x\\u%04x" % (0xD800 + (cp >> 10), 0xDC00 + (cp & 0x3FF))
    return "\\u%04x" % cp

def _keep(ch: str, mode: str) -> bool:
    if mode == "gt":
        return ch != ">"
    if ch.isascii() and ch.isalnum():
        return True
    return mode == "smf" and ch in "/*"

def escape_topic(topic: str, mode: str = "gt") -> str:
    """Rewrite a topic into the \\uXXXX notation HCL decodes back to the character.

    ``gt`` only escapes ``>``, ``full`` keeps ASCII letters and digits,
    ``smf`` additionally keeps the ``/`` level separator and ``*`` wildcard.
    """
    if mode not in ESCAPE_MODES:
        raise ValueError(f"unknown topic escape mode {mode!r}")
    return "".join(ch if _keep(ch, mode) else _unicode_escape(ch) for ch in topic or "")

def _hcl_quote_chars(s: str) -> str:
    return s.replace("\\", "\\\\").replace('"', '\\"')

def _hcl_no_template(s: str) -> str:
    return s.replace("${", "$${").replace("%{", "%%{")

def hcl_string(s: str) -> str:
    """Body of an HCL "..." literal holding ``s`` as-is (no interpolation)."""
    return _hcl_no_template(_hcl_quote_chars(s))

def hcl_topic(topic: str, mode: str = "gt") -> str:
    """``escape_topic`` output made safe inside an HCL "..." literal.

    Characters the escaper keeps get HCL quoting; its \\uXXXX sequences are
    left alone.
    """
    parts = []
    for ch in topic or "":
        esc = escape_topic(ch, mode)
        parts.append(_hcl_quote_chars(ch) if esc == ch else esc)
    return _hcl_no_template("".join(parts))
