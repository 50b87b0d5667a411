import logging
from pathlib import Path

import pytest

from meshchat.logger import setup_logging


def test_setup_logging_writes_to_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("MESHCHAT_LOG_LEVEL", "debug")
    setup_logging(tmp_path / "logs")

    logger = logging.getLogger("meshchat.test")
    logger.debug("hello log")
    for handler in logging.getLogger("meshchat").handlers:
        handler.flush()

    root = logging.getLogger("meshchat")
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert "hello log" in (tmp_path / "logs" / "meshchat.log").read_text()

    # reconfiguring replaces the previous handler
    setup_logging(tmp_path / "logs")
    assert len(root.handlers) == 1
    root.handlers[0].close()
    root.removeHandler(root.handlers[0])
    root.propagate = True
