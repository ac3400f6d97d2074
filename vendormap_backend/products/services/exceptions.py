# products/services/exceptions.py


class ProductUploadError(Exception):
    """Base exception for product upload failures."""

    status_code = 400
    default_message = "Upload failed"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingProductName(ProductUploadError):
    default_message = "Missing product name"


class InvalidPrice(ProductUploadError):
    default_message = "Invalid price"


class FileRequired(ProductUploadError):
    default_message = "file required"


class FileTooLarge(ProductUploadError):
    """Raised when the file exceeds settings.MAX_UPLOAD_BYTES."""

    default_message = "File too large"


class NotAVendor(ProductUploadError):
    """Raised when the caller has no vendor record to attach products to."""

    status_code = 403
    default_message = "Only vendors can upload products"


class StorageFailure(ProductUploadError):
    status_code = 500
    default_message = "Failed to store file"
