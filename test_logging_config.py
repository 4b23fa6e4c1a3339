import logging

from logging_config import setup_logging


def _restore(handlers, level):
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)


def test_setup_logging_writes_to_file(tmp_path):
    root = logging.getLogger()
    saved, level = list(root.handlers), root.level
    log_file = tmp_path / "app.log"
    try:
        setup_logging(logging.DEBUG, log_file=str(log_file))
        logging.getLogger("grid_engine").debug("hello from the grid")
        for h in root.handlers:
            h.flush()
        text = log_file.read_text()
        assert "Logging initialized." in text
        assert "grid_engine - DEBUG - hello from the grid" in text
    finally:
        _restore(saved, level)


def test_setup_logging_is_idempotent(tmp_path):
    root = logging.getLogger()
    saved, level = list(root.handlers), root.level
    try:
        setup_logging(logging.INFO, log_file=str(tmp_path / "a.log"))
        setup_logging(logging.INFO, log_file=str(tmp_path / "a.log"))
        assert len(root.handlers) == 1
    finally:
        _restore(saved, level)


def test_setup_logging_without_targets_installs_null_handler():
    root = logging.getLogger()
    saved, level = list(root.handlers), root.level
    try:
        setup_logging(logging.WARNING)
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], logging.NullHandler)
        assert root.level == logging.WARNING
    finally:
        _restore(saved, level)
