"""
Design (notify.py)
- Purpose: Desktop notification when the monitored target goes offline or comes back.
- Inputs: Target, online flag.
- Outputs: None.
- Side effects: Shows an OS notification through plyer. Hosts without a notification backend
                (headless servers, CI) only get a log line.
- Thread-safety: Safe to call from the monitor thread.
"""

from loguru import logger
from plyer import notification

from .config import NOTIFY_APP_NAME
from .models import Target


def desktop_notify(target: Target, online: bool) -> None:
    title = "Target Online" if online else "Target Offline"
    message = f"{target} is {'reachable again' if online else 'unreachable'}"
    try:
        notification.notify(title=title, message=message, app_name=NOTIFY_APP_NAME, timeout=5)
    except Exception as e:
        logger.info("Desktop notification unavailable ({}): {} - {}", e, title, message)
