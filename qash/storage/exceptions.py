class StoreError(Exception):
    """Persistence backend failed."""


class DocumentNotFoundError(StoreError):
    """No saved document with this id belongs to the user."""
