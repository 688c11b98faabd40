import re

_WHITESPACE = re.compile(r"\s+")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def derive_key(label: str) -> str:
    """Slug used for category keys and field names: 'My Comics' → 'my_comics'.

    Only case and whitespace change; every other character is kept as-is.
    """
    return _WHITESPACE.sub("_", label.lower())


def format_label(key: str) -> str:
    """Display label for a raw key: 'purchase_date' / 'purchaseDate' → 'Purchase Date'."""
    spaced = _CAMEL_BOUNDARY.sub(" ", key.replace("_", " "))
    return " ".join(word.capitalize() for word in spaced.split())
