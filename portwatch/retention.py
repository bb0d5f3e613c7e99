"""
Design (retention.py)
- Purpose: File-side collaborators of the port tool: wait for an arriving file to be fully
           written, copy it to a destination folder, and keep that folder bounded.
- Inputs: Paths, extension filter, max/keep counts.
- Outputs: Paths copied or deleted.
- Side effects: Copies and deletes files. Individual delete failures are logged and skipped.
- Thread-safety: Stateless; callers serialize work on one destination folder.
"""

import shutil
import time
from pathlib import Path
from typing import List, Optional

from loguru import logger


def cleanup_destination(dest_dir: Path, extension: str, max_files: int, keep: int) -> List[Path]:
    """
    Purpose: Once dest_dir holds max_files or more files ending in `extension`, delete the oldest
             so only the newest `keep` remain.
    Outputs: The deleted paths, oldest first.
    """
    dest_dir = Path(dest_dir)
    if not dest_dir.is_dir():
        return []
    pattern = f"*{extension}" if extension.startswith(".") or not extension else f"*.{extension}"
    files = sorted((p for p in dest_dir.glob(pattern) if p.is_file()), key=lambda p: p.stat().st_mtime)
    if len(files) < max_files:
        return []

    deleted: List[Path] = []
    for p in files[: max(len(files) - max(keep, 0), 0)]:
        try:
            p.unlink()
            deleted.append(p)
            logger.info("Deleted old file: {}", p.name)
        except OSError as e:
            logger.warning("Could not delete '{}': {}", p.name, e)
    return deleted


def wait_for_file_ready(path: Path, poll: float = 0.5, timeout: Optional[float] = None) -> bool:
    """
    Purpose: Block until `path` exists, opens for reading and keeps the same size across one poll.
    Outputs: True when ready; False if `timeout` seconds pass first.
    """
    path = Path(path)
    deadline = None if timeout is None else time.monotonic() + timeout
    last_size = None
    while True:
        try:
            with open(path, "rb"):
                size = path.stat().st_size
            if size == last_size:
                return True
            last_size = size
        except OSError:
            last_size = None
        if deadline is not None and time.monotonic() >= deadline:
            return False
        time.sleep(poll)


def relocate_file(path: Path, dest_dir: Path, extension: str, max_files: int, keep: int,
                  poll: float = 0.5, timeout: Optional[float] = None) -> Optional[Path]:
    """
    Purpose: "New file ready" handler: copy a finished file into dest_dir, then trim dest_dir.
    Outputs: Destination path, or None if the file never became ready.
    """
    path = Path(path)
    dest_dir = Path(dest_dir)
    if not wait_for_file_ready(path, poll=poll, timeout=timeout):
        logger.warning("File never became ready: {}", path)
        return None
    dest_dir.mkdir(parents=True, exist_ok=True)
    dest = dest_dir / path.name
    shutil.copy2(path, dest)
    logger.info("Copied to: {}", dest)
    cleanup_destination(dest_dir, extension, max_files, keep)
    return dest
