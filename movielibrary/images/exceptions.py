"""Image pipeline errors."""


class ImageStoreError(Exception):
    """Base exception for image storage operations."""

    pass


class InvalidImageDataError(ImageStoreError):
    """Raised when the input bytes cannot be decoded as an image."""

    pass


class ImageEncodingError(ImageStoreError):
    """Raised when the cropped image cannot be re-encoded."""

    pass


class ImageWriteError(ImageStoreError):
    """Raised when the encoded image cannot be written to storage."""

    def __init__(self, reference: str, cause: Exception) -> None:
        super().__init__(f"Could not write image {reference}: {cause}")
        self.reference = reference
