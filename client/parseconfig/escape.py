# parseconfig/escape.py

_ENCODED = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    "/": "&#x2F;",
    "'": "&#x27;",
    '"': "&quot;",
}

def escape(text: str) -> str:
    """HTML-escape ``text``, slashes included."""
    return "".join(_ENCODED.get(ch, ch) for ch in text)

def to_string(value) -> str:
    """String form of a config value as other Parse clients render it (``true``, ``1,2``)."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(to_string(v) for v in value)
    return str(value)
