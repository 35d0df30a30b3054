"""
Exceptions raised by the SportX SDK
"""

from typing import Any, Optional


class SportXError(Exception):
    """Base exception for all SportX SDK errors"""

    pass


class APISchemaError(SportXError):
    """Request arguments failed local validation; nothing was sent"""

    pass


class APIError(SportXError):
    """The relayer rejected a call or answered with something unreadable"""

    def __init__(
        self,
        data: Any,
        message: str,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.data = data
        self.status_code = status_code

    @property
    def reason(self) -> Optional[str]:
        if isinstance(self.data, dict):
            return self.data.get("reason")
        return None


class APITimeoutError(SportXError):
    """A relayer connection or call exceeded its deadline"""

    pass


class ConfigurationError(SportXError):
    """Client was constructed or initialized incorrectly"""

    pass


class SigningError(SportXError):
    """A delegated wallet failed to produce a signature"""

    pass
