import json
import os

HOME = os.path.expanduser("~")
XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME")
CONFIG_HOME = XDG_CONFIG_HOME if XDG_CONFIG_HOME else os.path.join(HOME, ".config")
CONFIG_DIR = os.path.join(CONFIG_HOME, "sheetlite")
CONFIG_JSON = os.path.join(CONFIG_DIR, "config.json")
LOG_PATH = os.path.join(CONFIG_DIR, "sheetlite.log")

# default settings
EMPTY_ROW_BUDGET_DEFAULT = 20
EXPORT_FILENAME_DEFAULT = "project-data.csv"
CLIPBOARD_INTERFACE_COMMAND_DEFAULT = None
LOG_LEVEL_DEFAULT = "INFO"

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def ensure_config_dirs():
    os.makedirs(CONFIG_DIR, exist_ok=True)


def load_config():
    cfg = {
        "EMPTY_ROW_BUDGET": EMPTY_ROW_BUDGET_DEFAULT,
        "EXPORT_FILENAME": EXPORT_FILENAME_DEFAULT,
        "CLIPBOARD_INTERFACE_COMMAND": CLIPBOARD_INTERFACE_COMMAND_DEFAULT,
        "LOG_LEVEL": LOG_LEVEL_DEFAULT,
    }

    if not os.path.exists(CONFIG_JSON):
        return cfg

    try:
        with open(CONFIG_JSON, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError):
        return cfg
    if not isinstance(data, dict):
        return cfg

    budget = data.get("empty_row_budget")
    if isinstance(budget, int) and not isinstance(budget, bool) and budget >= 0:
        cfg["EMPTY_ROW_BUDGET"] = budget

    export_name = data.get("export_filename")
    if isinstance(export_name, str) and export_name.strip():
        cfg["EXPORT_FILENAME"] = export_name.strip()

    clip_cmd = data.get("clipboard_interface_command")
    if isinstance(clip_cmd, list) and clip_cmd and all(
        isinstance(item, str) for item in clip_cmd
    ):
        cfg["CLIPBOARD_INTERFACE_COMMAND"] = clip_cmd

    level = data.get("log_level")
    if isinstance(level, str) and level.strip().upper() in _LOG_LEVELS:
        cfg["LOG_LEVEL"] = level.strip().upper()

    return cfg
