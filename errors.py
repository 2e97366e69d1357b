from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    UPSTREAM = "upstream"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.UPSTREAM: 502,
}


class RouterError(Exception):
    kind: ErrorKind = ErrorKind.UPSTREAM

    def __init__(self, message: str, kind: ErrorKind | None = None):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind

    @property
    def status_code(self) -> int:
        return self.kind.status_code


class ValidationError(RouterError):
    kind = ErrorKind.VALIDATION


class NotFoundError(RouterError):
    kind = ErrorKind.NOT_FOUND


class UpstreamError(RouterError):
    kind = ErrorKind.UPSTREAM
