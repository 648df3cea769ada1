from typing import Optional


class NewsDigestError(Exception):
    pass


class ValidationError(NewsDigestError):
    pass


class SelectionError(NewsDigestError):
    """Raised when countries or sites cannot be selected for a run.

    This is the only fault that aborts a crawl run; everything downstream
    degrades to fewer results.
    """

    def __init__(self, message: str, cause: Optional[str] = None):
        self.message = message
        self.cause = cause or message
        super().__init__(message)


class ExternalServiceError(NewsDigestError):
    pass


class NetworkError(ExternalServiceError):
    pass


class PersistenceError(ExternalServiceError):
    pass
