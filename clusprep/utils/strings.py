SEMI_COLON_TOKEN = "SEMI_COLON"
MAX_ATTRIBUTE_NAME_LENGTH = 30
TRUNCATION_MARKER = ".."

# Characters that force an ARFF token to be single-quoted.
_QUOTE_TRIGGERS = set("\n\r'\"\\\t%\u001e ,{}?")

_ESCAPES = {
    "\\": "\\\\",
    "'": "\\'",
    '"': '\\"',
    "\t": "\\t",
    "\n": "\\n",
    "\r": "\\r",
    "%": "\\%",
    "\u001e": "\\u001E",
}


def replace_semicolons(text: str) -> str:
    """CLUS uses ';' as a separator, so it may not appear in names or values."""
    return text.replace(";", SEMI_COLON_TOKEN)


def truncate_attribute_name(name: str) -> str:
    if len(name) > MAX_ATTRIBUTE_NAME_LENGTH:
        return name[:MAX_ATTRIBUTE_NAME_LENGTH] + TRUNCATION_MARKER
    return name


def sanitize_attribute_name(name: str) -> str:
    """
    Makes an attribute name acceptable to CLUS.

    Every ';' is replaced with SEMI_COLON first, then names longer than 30
    characters are cut to their first 30 characters followed by '..'.
    Distinct names may collapse to the same sanitized name; this is not checked.
    """
    return truncate_attribute_name(replace_semicolons(name))


def quote_arff(value: str) -> str:
    """Quote a name or nominal value the way Weka writes ARFF tokens."""
    if value == "" or value == "?" or any(ch in _QUOTE_TRIGGERS for ch in value):
        escaped = "".join(_ESCAPES.get(ch, ch) for ch in value)
        return f"'{escaped}'"
    return value
