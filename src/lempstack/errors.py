"""Domain errors for lempstack."""


class BootstrapError(RuntimeError):
    """Raised when the bootstrap workflow cannot continue safely."""


class ReadinessTimeoutError(BootstrapError):
    """Raised when a service never reports ready within the polling budget."""
