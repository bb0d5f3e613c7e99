"""
Design (config.py)
- Purpose: Centralize constants and configuration defaults.
- Inputs: None.
- Outputs: Constants (hosts, intervals, timeouts, default port labels, file names).
- Side effects: None.
- Thread-safety: N/A (read-only constants).
"""

# Host the listeners bind to and the `test` command probes.
LOOPBACK_HOST = "127.0.0.1"

# Reachability monitor
MONITOR_HOST = "127.0.0.1"
MONITOR_PORT = 80
MONITOR_INTERVAL_SEC = 5
FAILURE_THRESHOLD = 3     # 3 consecutive failures (~15s) => offline

# Probe timeouts: short for health checks, longer for operator `test` commands
HEALTH_CHECK_TIMEOUT_SEC = 0.5
PORT_TEST_TIMEOUT_SEC = 2.0

# Accept loop idle wait between readiness checks
ACCEPT_POLL_SEC = 0.1
# How long stop() waits for an accept thread to notice cancellation
ACCEPT_JOIN_TIMEOUT_SEC = 1.0

# Sentinel for "configured but disabled"
DISABLED_PORT = -1
DISABLED_TOKEN = "disabled"

# Label used for listeners opened with the `start` command
MANUAL_LABEL = "MANUAL"

# Used when no port file exists: port -> label, in startup order
DEFAULT_PORTS = {
    7129: "CLS",
    7130: "OCR",
    DISABLED_PORT: "-1",
}

# Persistence: port/label file (path resolved in storage module)
PORTS_FILENAME = "ports.json"
CONFIG_ENV_VAR = "PORTWATCH_CONFIG"

# Maximum number of event records kept in memory (oldest trimmed)
LOG_MAX_LINES = 1000

NOTIFY_APP_NAME = "Port Watch"
