import json
import tempfile
from pathlib import Path

import config_paths


def _with_config(data):
    tmp = tempfile.TemporaryDirectory()
    cfg_dir = Path(tmp.name) / "sheetlite"
    cfg_dir.mkdir(parents=True, exist_ok=True)
    cfg_path = cfg_dir / "config.json"
    if data is not None:
        cfg_path.write_text(data if isinstance(data, str) else json.dumps(data))
    return tmp, cfg_dir, cfg_path


def _load(cfg_dir, cfg_path):
    orig_dir = config_paths.CONFIG_DIR
    orig_json = config_paths.CONFIG_JSON
    try:
        config_paths.CONFIG_DIR = str(cfg_dir)
        config_paths.CONFIG_JSON = str(cfg_path)
        return config_paths.load_config()
    finally:
        config_paths.CONFIG_DIR = orig_dir
        config_paths.CONFIG_JSON = orig_json


def test_load_config_defaults_without_json():
    tmp, cfg_dir, cfg_path = _with_config(None)
    with tmp:
        cfg = _load(cfg_dir, cfg_path)
    assert cfg["EMPTY_ROW_BUDGET"] == 20
    assert cfg["EXPORT_FILENAME"] == "project-data.csv"
    assert cfg["CLIPBOARD_INTERFACE_COMMAND"] is None
    assert cfg["LOG_LEVEL"] == "INFO"


def test_load_config_reads_json_overrides():
    tmp, cfg_dir, cfg_path = _with_config(
        {
            "empty_row_budget": 5,
            "export_filename": "tasks.csv",
            "clipboard_interface_command": ["wl-copy"],
            "log_level": "debug",
        }
    )
    with tmp:
        cfg = _load(cfg_dir, cfg_path)
    assert cfg["EMPTY_ROW_BUDGET"] == 5
    assert cfg["EXPORT_FILENAME"] == "tasks.csv"
    assert cfg["CLIPBOARD_INTERFACE_COMMAND"] == ["wl-copy"]
    assert cfg["LOG_LEVEL"] == "DEBUG"


def test_load_config_ignores_badly_typed_values():
    tmp, cfg_dir, cfg_path = _with_config(
        {
            "empty_row_budget": -1,
            "export_filename": "",
            "clipboard_interface_command": "wl-copy",
            "log_level": "LOUD",
        }
    )
    with tmp:
        cfg = _load(cfg_dir, cfg_path)
    assert cfg["EMPTY_ROW_BUDGET"] == 20
    assert cfg["EXPORT_FILENAME"] == "project-data.csv"
    assert cfg["CLIPBOARD_INTERFACE_COMMAND"] is None
    assert cfg["LOG_LEVEL"] == "INFO"


def test_load_config_survives_broken_json():
    for payload in ("{not json", "[1, 2]"):
        tmp, cfg_dir, cfg_path = _with_config(payload)
        with tmp:
            cfg = _load(cfg_dir, cfg_path)
        assert cfg["EMPTY_ROW_BUDGET"] == 20
