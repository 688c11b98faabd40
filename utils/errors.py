"""Error kinds raised by the category registry, migration engine and stores.

Each kind also derives from the closest builtin so UI code can keep
catching ``ValueError`` the way the forms always have.
"""


class CollectionError(Exception):
    """Base class for every error the collection core raises."""


class ValidationError(CollectionError, ValueError):
    """Malformed category, field definition or field value."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class NotFoundError(CollectionError, LookupError):
    """A category key or record id does not exist for the current owner."""


class StorageError(CollectionError):
    """Reading or writing a category/settings file or the record store failed."""


class AccessDenied(CollectionError, PermissionError):
    """The operation is not scoped to a valid owner."""
