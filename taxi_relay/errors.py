from typing import Optional


class RelayError(Exception):
    """Base exception for every rejection the relay answers with an HTTP status."""
    status_code: int = 500
    detail: str = "Internal Server Error"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        if detail is not None:
            self.detail = detail
        super().__init__(message or self.detail)


# Auth layer

class AuthError(RelayError):
    status_code = 401


class MissingCredential(AuthError):
    status_code = 400
    detail = "Missing auth headers"


class UnknownKey(AuthError):
    detail = "Invalid API key"


class MalformedTimestamp(AuthError):
    status_code = 400
    detail = "Invalid timestamp"


class StaleTimestamp(AuthError):
    detail = "Stale timestamp"


# Input shape

class MissingField(RelayError):
    status_code = 400
    detail = "Missing fields"


class InvalidFormat(RelayError):
    status_code = 400
    detail = "Invalid list format"


# Policy

class DeviceBlocked(RelayError):
    status_code = 403
    detail = "Device blocked"


# Downstream. The detail stays generic; the message carries the diagnostics for the logs.

class DispatchError(RelayError):
    status_code = 500


class AuthExchangeFailure(DispatchError):
    pass


class BackendRejected(DispatchError):
    def __init__(self, message: str, status: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.body = body
