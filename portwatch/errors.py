class PortWatchError(Exception):
    """Base exception for portwatch."""


class BindError(PortWatchError):
    """A listener could not acquire the requested port (in use, denied, out of range)."""

    def __init__(self, port, reason):
        super().__init__(f"Failed to start port {port}: {reason}")
        self.port = port
        self.reason = reason


class ConflictError(PortWatchError):
    """start() was requested for a port that already has a live listener."""

    def __init__(self, port):
        super().__init__(f"Port {port} already running.")
        self.port = port


class NotFoundError(PortWatchError):
    """stop() was requested for a port with no live listener."""

    def __init__(self, port):
        super().__init__(f"Port {port} not running.")
        self.port = port


class ConfigError(PortWatchError):
    """The startup port configuration could not be read."""
