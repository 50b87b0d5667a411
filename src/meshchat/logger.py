import logging
import os
from pathlib import Path
from typing import Optional

from meshchat.runtime_config import LOG_LEVEL_ENV, get_data_dir


def setup_logging(log_dir: Optional[Path] = None) -> None:
    """Send log records to <data dir>/meshchat.log so they never mix with the chat UI."""
    log_dir = log_dir or get_data_dir()
    log_dir.mkdir(parents=True, exist_ok=True)

    level_name = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    handler = logging.FileHandler(log_dir / "meshchat.log")
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
    )

    root = logging.getLogger("meshchat")
    root.setLevel(level)
    for existing in list(root.handlers):
        root.removeHandler(existing)
        existing.close()
    root.addHandler(handler)
    root.propagate = False
