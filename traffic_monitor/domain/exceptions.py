"""Domain-specific exceptions — framework-independent."""


class TrafficMonitorError(Exception):
    """Base class for every error raised by the traffic monitor core."""


class SchemaError(TrafficMonitorError):
    """Raised when the traffic tables cannot be created or dropped."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.message = message
        super().__init__(f"{operation} failed: {message}")


class PartialTeardownError(SchemaError):
    """Raised when schema teardown stops partway and leaves partial state.

    Steps that already completed are not rolled back, so the operator has
    to finish the uninstall manually (or simply run it again).
    """

    def __init__(self, failed_step: str, completed_steps: list[str], message: str):
        self.failed_step = failed_step
        self.completed_steps = list(completed_steps)
        done = ", ".join(self.completed_steps) or "none"
        super().__init__(
            "teardown_schema",
            f"step '{failed_step}' failed after [{done}]: {message}",
        )


class WriteError(TrafficMonitorError):
    """Raised when a client, record, purge or update write fails."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.message = message
        super().__init__(f"{operation} failed: {message}")


class QueryError(TrafficMonitorError):
    """Raised when a read or aggregate query fails."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.message = message
        super().__init__(f"{operation} failed: {message}")


class ConfigError(TrafficMonitorError):
    """Raised when an operator setting has a malformed value."""

    def __init__(self, setting: str, value: object, message: str):
        self.setting = setting
        self.value = value
        self.message = message
        super().__init__(f"Invalid {setting}={value!r}: {message}")
