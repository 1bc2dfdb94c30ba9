class TelemetryError(Exception):
    """Base error for the telemetry subsystem, surfaced to clients as HTTP 500."""


class DatabaseNotConfiguredError(TelemetryError):
    def __init__(self, message: str = "Database not configured"):
        super().__init__(message)
