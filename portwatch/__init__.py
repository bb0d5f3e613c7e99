from .errors import BindError, ConfigError, ConflictError, NotFoundError, PortWatchError
from .events import EventLog, configure_logging
from .models import EventRecord, ListenerEntry, MonitorState, PortConfigEntry, Target
from .monitor import ReachabilityMonitor
from .probe import probe, probe_many
from .registry import Registry
from .dispatcher import CommandDispatcher, parse_command

__all__ = [
    "BindError",
    "ConfigError",
    "ConflictError",
    "NotFoundError",
    "PortWatchError",
    "EventLog",
    "configure_logging",
    "EventRecord",
    "ListenerEntry",
    "MonitorState",
    "PortConfigEntry",
    "Target",
    "ReachabilityMonitor",
    "probe",
    "probe_many",
    "Registry",
    "CommandDispatcher",
    "parse_command",
]
