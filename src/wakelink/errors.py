"""Domain-specific errors for wakelink."""


class WakelinkError(Exception):
    """Base error for wakelink."""


class PersistError(WakelinkError):
    """Raised when the device snapshot cannot be written to the store."""


class DeliveryError(WakelinkError):
    """Base error for a command that could not be queued for a connection."""


class ConnectionClosedError(DeliveryError):
    """Raised when the target connection has already been torn down."""


class OutboxFullError(DeliveryError):
    """Raised when the connection's outbound queue has no free slot."""
