"""
Base exception classes for the application.

Exception hierarchy follows the layer structure:
- Client/repository layer raises technical exceptions (UpstreamError family)
- Service layer raises domain exceptions
- API layer transforms both into HTTP responses (see api/exception_handlers.py)
"""


class AppException(Exception):
    """
    Base exception for all application-specific exceptions.

    All custom exceptions should inherit from this class.
    This allows for easy catching of all app exceptions if needed.
    """

    def __init__(self, message: str = "An application error occurred"):
        self.message = message
        super().__init__(self.message)


# ============================================================================
# DOMAIN EXCEPTIONS (raised by service layer)
# ============================================================================


class ValidationError(AppException):
    """
    Raised when business validation rules are violated.

    Examples:
    - Static IP outside the interface subnet
    - Unknown subsystem passed to apply
    - Attempt to delete a protected alias

    Typically maps to HTTP 400
    """

    pass


class NotFoundError(AppException):
    """
    Raised when a requested resource doesn't exist on the appliance.

    Typically maps to HTTP 404
    """

    pass


class AlreadyExistsError(AppException):
    """
    Raised when trying to create a resource that already exists.

    Examples:
    - Alias with the same name already defined

    Typically maps to HTTP 409 (Conflict)
    """

    pass


class AuthorizationError(AppException):
    """
    Raised when the caller did not present the shared secret.

    Typically maps to HTTP 401 (Unauthorized)
    """

    pass


class ConfigurationError(AppException):
    """Raised when required settings are missing (e.g. PFSENSE_URL)."""

    pass


# ============================================================================
# SPECIFIC DOMAIN EXCEPTIONS
# ============================================================================


class InvalidIdentifier(ValidationError):
    """Identifier is empty, not a string, or malformed (e.g. a bad MAC)."""

    def __init__(self, message: str = "Identifier is required"):
        super().__init__(message)


class AliasNotFound(NotFoundError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Alias {name} not found")


class HostnameUnresolved(NotFoundError):
    def __init__(self, hostname: str):
        self.hostname = hostname
        super().__init__(f"Hostname {hostname} does not match any DHCP lease")


class ClientNotFound(NotFoundError):
    def __init__(self, mac: str):
        self.mac = mac
        super().__init__(f"No connected client with MAC {mac}")


class BlockedSetMissing(NotFoundError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"{name} alias not found")


# ============================================================================
# UPSTREAM/TECHNICAL EXCEPTIONS (raised by client/repository layer)
# ============================================================================


class UpstreamError(AppException):
    """
    Base exception for failures talking to the appliance.

    Typically maps to HTTP 502 (Bad Gateway)
    """

    pass


class UpstreamUnavailable(UpstreamError):
    """
    Raised for any transport failure or non-2xx answer from the appliance.

    Carries the HTTP status returned by the appliance when there was one.
    """

    def __init__(self, message: str = "pfSense is unavailable", status_code: int = None):
        self.status_code = status_code
        super().__init__(message)


class ApplyFailed(UpstreamError):
    """
    Raised when the write succeeded but activating it on the appliance failed.

    Kept distinct from UpstreamUnavailable so callers can tell a staged
    change from a lost one.
    """

    def __init__(self, subsystem: str):
        self.subsystem = subsystem
        super().__init__(f"Failed to apply {subsystem} changes")
