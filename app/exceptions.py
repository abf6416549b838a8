from typing import Any, Mapping, Optional


class NutriChatError(Exception):
    """Base class for failures surfaced to API callers.

    Attributes:
        message: human-readable (user-facing) message
        details: optional mapping with extra context
        code: optional machine-readable error code
        http_status: suggested HTTP status code for handlers
        fault: "client" when the caller sent something unusable, "server" otherwise
    """

    http_status = 500
    fault = "server"
    default_code = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str = "伺服器發生錯誤，請稍後再試。",
        details: Optional[Mapping[str, Any]] = None,
        code: Optional[str] = None,
        http_status: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code or self.default_code
        if http_status is not None:
            self.http_status = http_status

    @property
    def is_client_fault(self) -> bool:
        return self.fault == "client"

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message}
        if self.code:
            payload["code"] = self.code
        if self.details:
            payload["details"] = dict(self.details)
        return payload

    def __str__(self) -> str:
        return self.message


class InvalidRequestError(NutriChatError):
    """Raised when the caller's request cannot be planned (missing goal, unsafe infant age, empty plan)."""

    http_status = 400
    fault = "client"
    default_code = "INVALID_REQUEST"


class UpstreamError(NutriChatError):
    """Raised when the generator times out, answers with a non-success status or returns nothing.

    http_status is 504 for timeouts, the upstream status for 5xx replies and 502 otherwise.
    """

    http_status = 502
    default_code = "UPSTREAM_FAILURE"

    def __init__(
        self,
        message: str,
        http_status: Optional[int] = None,
        upstream_status: Optional[int] = None,
        upstream_body: Optional[str] = None,
        code: Optional[str] = None,
    ):
        details = {}
        if upstream_status is not None:
            details["upstream_status"] = upstream_status
        super().__init__(message, details=details or None, code=code, http_status=http_status)
        self.upstream_status = upstream_status
        self.upstream_body = upstream_body


class MalformedResponseError(NutriChatError):
    """Raised when the generator's text does not contain a usable plan."""

    http_status = 502
    default_code = "MALFORMED_RESPONSE"


class ConfigurationError(NutriChatError):
    """Raised when the service is missing configuration it needs (e.g. an API credential)."""

    http_status = 500
    default_code = "CONFIGURATION_ERROR"
