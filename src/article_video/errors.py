"""Terminal error types. Degradable services report through flags instead."""


class ArticleVideoError(Exception):
    """Base class for every error this package raises on purpose."""


class FetchError(ArticleVideoError):
    """Network fetch failed after all retries (or returned a final error status)."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class ExtractionError(ArticleVideoError):
    """The page did not yield enough article text to narrate."""


class EngineLoadError(ArticleVideoError):
    """The media engine binary could not be located or started."""


class EngineRunError(ArticleVideoError):
    """A single engine invocation exited unsuccessfully."""

    def __init__(self, message: str, returncode: int = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class EncodingError(ArticleVideoError):
    """Every video codec was tried and none produced an output file."""
