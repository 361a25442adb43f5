from localconnect.services.error_codes import ErrorCode


class ServiceError(Exception):
    """Base error raised by the service layer; routers map it to HTTP."""

    def __init__(self, code: ErrorCode | str, message: str | None = None) -> None:
        self.code = code.value if isinstance(code, ErrorCode) else code
        self.message = message or self.code
        super().__init__(self.message)


class NotFoundError(ServiceError):
    pass


class PermissionDeniedError(ServiceError):
    pass


class ConflictError(ServiceError):
    pass


class ValidationError(ServiceError):
    pass
