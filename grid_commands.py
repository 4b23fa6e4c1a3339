import logging
import shlex
from dataclasses import dataclass
from typing import Optional, Union

from view_pipeline import ASCENDING, DESCENDING

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Sort:
    field: str
    direction: str = ASCENDING


@dataclass(frozen=True)
class Filter:
    field: str
    value: str


@dataclass(frozen=True)
class ClearFilter:
    pass


@dataclass(frozen=True)
class HideField:
    field: str


@dataclass(frozen=True)
class Export:
    path: Optional[str] = None


@dataclass(frozen=True)
class Import:
    path: str


@dataclass(frozen=True)
class Share:
    pass


@dataclass(frozen=True)
class NewAction:
    pass


@dataclass(frozen=True)
class CellView:
    pass


Command = Union[Sort, Filter, ClearFilter, HideField, Export, Import, Share, NewAction, CellView]

COMMAND_TYPES = (Sort, Filter, ClearFilter, HideField, Export, Import, Share, NewAction, CellView)

COMMAND_WORDS = (
    "sort",
    "filter",
    "clear-filter",
    "hide-field",
    "export",
    "import",
    "share",
    "new-action",
    "cell-view",
)

_DIRECTIONS = {
    "asc": ASCENDING,
    "ascending": ASCENDING,
    "a-z": ASCENDING,
    "desc": DESCENDING,
    "descending": DESCENDING,
    "z-a": DESCENDING,
}


def _direction(value) -> Optional[str]:
    if value is None:
        return ASCENDING
    if not isinstance(value, str):
        return None
    return _DIRECTIONS.get(value.strip().lower())


def _text(payload: dict, *keys) -> Optional[str]:
    for key in keys:
        value = payload.get(key)
        if isinstance(value, str):
            return value
    return None


def parse_action(name, payload=None) -> Optional[Command]:
    """Build a command from its action name and loose payload.

    Unknown names and malformed payloads are logged and yield ``None``.
    Payload keys accept both ``field`` and the older ``key``/``column``
    spellings.
    """
    payload = payload if isinstance(payload, dict) else {}

    if name == "sort":
        field = _text(payload, "field", "key", "column")
        direction = _direction(payload.get("direction"))
        if field is None or direction is None:
            logger.warning("Malformed sort payload: %r", payload)
            return None
        return Sort(field, direction)

    if name == "filter":
        field = _text(payload, "field", "column")
        value = _text(payload, "value")
        if field is None or value is None:
            logger.warning("Malformed filter payload: %r", payload)
            return None
        return Filter(field, value)

    if name == "clear-filter":
        return ClearFilter()

    if name == "hide-field":
        field = _text(payload, "field")
        if field is None:
            logger.warning("Malformed hide-field payload: %r", payload)
            return None
        return HideField(field)

    if name == "export":
        return Export(_text(payload, "path", "file"))

    if name == "import":
        path = _text(payload, "file", "path")
        if not path:
            logger.warning("Malformed import payload: %r", payload)
            return None
        return Import(path)

    if name == "share":
        return Share()

    if name == "new-action":
        return NewAction()

    if name == "cell-view":
        return CellView()

    logger.info("Action %s not implemented", name)
    return None


# short forms accepted on the ':' command line
_LINE_ALIASES = {
    "hide": "hide-field",
    "new": "new-action",
    "clear": "clear-filter",
    "nofilter": "clear-filter",
}


def parse_command_line(text: str) -> Optional[Command]:
    """Parse ``sort status desc``, ``filter status in progress``, ``import a.csv`` ..."""
    try:
        parts = shlex.split(text or "")
    except ValueError:
        logger.warning("Unbalanced quotes in command line: %r", text)
        return None
    if not parts:
        return None

    name = _LINE_ALIASES.get(parts[0].lower(), parts[0].lower())
    args = parts[1:]

    if name == "sort":
        if not args:
            return parse_action(name, {})
        payload = {"field": args[0]}
        if len(args) > 1:
            payload["direction"] = args[1]
        return parse_action(name, payload)

    if name == "filter":
        if len(args) < 2:
            return parse_action(name, {})
        return parse_action(name, {"field": args[0], "value": " ".join(args[1:])})

    if name == "hide-field":
        return parse_action(name, {"field": args[0]} if args else {})

    if name in ("export", "import"):
        return parse_action(name, {"path": " ".join(args)} if args else {})

    return parse_action(name, {})
