"""
Square API Exceptions

Typed error hierarchy for the Square client. Everything the library raises
derives from SquareError so callers can catch one base class.
"""

from typing import Any, Dict, List, Optional, Sequence


class SquareError(Exception):
    """Base exception for all Square client errors"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(SquareError):
    """Malformed client configuration (e.g. an empty access token)"""
    pass


class ValidationError(SquareError):
    """A request could not be built; no network call was made"""

    def __init__(self, message: str, fields: Optional[Sequence[str]] = None):
        super().__init__(message)
        self.fields = list(fields or [])


class ConflictError(ValidationError):
    """Mutually-exclusive fields were both set on a builder"""
    pass


class BuilderConsumedError(ValidationError):
    """A builder was finalized more than once"""
    pass


class TransportError(SquareError):
    """Connectivity or timeout failure while reaching Square"""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class RemoteError(SquareError):
    """Square answered with an error body; errors are carried unmodified"""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 errors: Optional[List[Dict[str, Any]]] = None,
                 response: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.errors = errors or []
        self.response = response

    @property
    def code(self) -> Optional[str]:
        """Code of the first remote error, if any"""
        if self.errors:
            return self.errors[0].get("code")
        return None

    @property
    def detail(self) -> Optional[str]:
        """Detail of the first remote error, if any"""
        if self.errors:
            return self.errors[0].get("detail")
        return None


class AuthError(RemoteError):
    """Square rejected the credentials (401/403)"""
    pass


class NotFoundError(RemoteError):
    """The requested resource does not exist (404)"""

    def __init__(self, message: str, resource_id: Optional[str] = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.resource_id = resource_id


class RateLimitError(RemoteError):
    """Square throttled the request (429)"""

    def __init__(self, message: str, retry_after: Optional[int] = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after
