"""
Design (storage.py)
- Purpose: Load and save the port -> label configuration to/from disk (JSON).
- Inputs: Path (from get_config_path()), list of PortConfigEntry for save.
- Outputs: list[PortConfigEntry] in file order on load; None on save.
- Side effects: Reads/writes file. A missing file yields the built-in defaults; an unreadable or
                malformed file raises ConfigError (startup cannot continue without a config).
- Thread-safety: Called once from the main thread before any component starts.
"""

import json
import os
from pathlib import Path
from typing import Any, List, Optional

from .config import CONFIG_ENV_VAR, DEFAULT_PORTS, DISABLED_TOKEN, PORTS_FILENAME
from .errors import ConfigError
from .models import PortConfigEntry


def get_config_path() -> Path:
    """
    Resolve path for ports.json: $PORTWATCH_CONFIG if set, otherwise next to the project root.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path(__file__).resolve().parent.parent / PORTS_FILENAME


def default_port_config() -> List[PortConfigEntry]:
    return [PortConfigEntry(port=_parse_port(p), label=str(label)) for p, label in DEFAULT_PORTS.items()]


def load_port_config(path: Path) -> List[PortConfigEntry]:
    """
    Accepts either a list of {"port": ..., "label": ...} objects or an object mapping
    port -> label. Port values that are "disabled", non-positive or unparsable become
    disabled entries: kept in order, never auto-started.
    """
    if not path.exists():
        return default_port_config()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read port config {path}: {e}") from e

    if isinstance(data, dict):
        items = [{"port": k, "label": v} for k, v in data.items()]
    elif isinstance(data, list):
        items = data
    else:
        raise ConfigError(f"Port config {path} must be a JSON list or object")

    entries: List[PortConfigEntry] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        raw = item.get("port")
        entries.append(PortConfigEntry(port=_parse_port(raw), label=str(item.get("label", raw))))
    return entries


def save_port_config(entries: List[PortConfigEntry], path: Path) -> None:
    """
    Save the port list as JSON. Disabled entries are written with the "disabled" token.
    """
    data = [
        {"port": e.port if e.enabled else DISABLED_TOKEN, "label": e.label}
        for e in entries
    ]
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def enabled_entries(entries: List[PortConfigEntry]) -> List[PortConfigEntry]:
    return [e for e in entries if e.enabled]


def _parse_port(raw: Any) -> Optional[int]:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str) and raw.strip().lower() == DISABLED_TOKEN:
        return None
    try:
        port = int(raw)
    except (TypeError, ValueError):
        return None
    if port > 65535:
        return None
    return port
