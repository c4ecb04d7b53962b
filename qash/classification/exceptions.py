class ClassificationError(Exception):
    """Base exception for upload classification failures."""


class EmptyFileError(ClassificationError):
    """Raised when an uploaded file has zero bytes."""


class BlockedExtensionError(ClassificationError):
    """Raised when a file name carries an executable or script extension."""


class UnsupportedTypeError(ClassificationError):
    """Raised when the declared media type is not on the allow-list."""


class ContentTypeMismatchError(ClassificationError):
    """Raised in strict mode when sniffed content disagrees with the declared type."""
