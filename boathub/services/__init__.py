"""Service layer — business logic orchestration."""


class ServiceError(Exception):
    """Base service exception."""


class NotFoundError(ServiceError):
    """Resource not found (-> HTTP 404)."""


class ValidationError(ServiceError):
    """Malformed or out-of-range input, raised before any store access (-> HTTP 400)."""


class ConflictError(ValidationError):
    """Store rejected a write on a uniqueness constraint (-> HTTP 400)."""


class AuthenticationError(ServiceError):
    """Bad credentials, disabled account or missing session (-> HTTP 401)."""


class AuthorizationError(ServiceError):
    """Authenticated but not allowed, e.g. bad anti-forgery token (-> HTTP 403)."""


class InternalError(ServiceError):
    """Unclassified store or connectivity failure (-> HTTP 500)."""
