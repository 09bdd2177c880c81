"""
Identifier Sanitizer — Flattens hierarchical identifiers into path segments.

Namespaces such as "root/cimv2" or "root\\interop" contain characters that the
filesystem treats as directory separators. Each separator kind is mapped to its
own placeholder so the two never collide:

    "/"  ->  "#"
    "\\" ->  "@"

No other characters are touched, so identifiers that are already free of
separators come back unchanged.
"""

SEPARATOR_PLACEHOLDERS = {
    "/": "#",
    "\\": "@",
}


def sanitize_identifier(identifier: str) -> str:
    """Return a single flat path segment for a namespace or class identifier.

    Args:
        identifier: A namespace, class name, or instance-path string.

    Returns:
        The identifier with every path separator replaced by its placeholder.
    """
    segment = identifier
    for separator, placeholder in SEPARATOR_PLACEHOLDERS.items():
        segment = segment.replace(separator, placeholder)
    return segment
