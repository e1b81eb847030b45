"""Error taxonomy for the try-on pipeline.

Configuration errors are fatal to the attempted operation and raised before
any network call. Service errors are raised by the client and usually absorbed
by a fallback. Local resource errors abort an editing or export operation and
leave prior state untouched.
"""


class FitBoardError(Exception):
    """Base class for all pipeline errors."""


class ConfigurationError(FitBoardError):
    """The credential is missing."""


class GenerationRefused(FitBoardError):
    """A try-on run was rejected by the start guard."""


class ServiceError(FitBoardError):
    """The generation service failed or answered with something unusable."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class BlurError(FitBoardError):
    """Face blur returned no image."""


class EnhancementError(FitBoardError):
    """Realism enhancement returned no image."""


class LocalResourceError(FitBoardError):
    """A local image or canvas operation could not be completed."""


class ImageDecodeError(LocalResourceError):
    """Image bytes could not be decoded."""


class CropError(LocalResourceError):
    """No usable crop selection was committed."""


class ExportError(LocalResourceError):
    """Building or encoding an export canvas failed."""
