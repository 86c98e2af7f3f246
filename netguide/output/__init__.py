"""Output writers for interactive HTML page and static SVG snapshot."""


def esc(s: str) -> str:
    """Escape text for HTML and SVG markup, attribute values included."""
    return s.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;").replace("'", "&#39;")
