class ServiceError(Exception):
    """Base exception for service-level errors."""


class NotFoundError(ServiceError):
    pass


class ConflictError(ServiceError):
    pass


class ValidationError(ServiceError):
    pass
