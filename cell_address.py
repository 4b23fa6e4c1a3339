import re

_ADDRESS_RE = re.compile(r"^([A-Za-z]+)([1-9][0-9]*)$")


def column_label(index: int) -> str:
    """0 -> 'A', 25 -> 'Z', 26 -> 'AA' (bijective base-26)."""
    if index < 0:
        raise ValueError(f"Column index must be non-negative, got {index}")
    label = ""
    while index >= 0:
        label = chr(ord("A") + index % 26) + label
        index = index // 26 - 1
    return label


def column_index(label: str) -> int:
    if not label or not label.isascii() or not label.isalpha():
        raise ValueError(f"Invalid column label: {label!r}")
    index = 0
    for ch in label.upper():
        index = index * 26 + (ord(ch) - ord("A") + 1)
    return index - 1


def cell_address(row: int, col: int) -> str:
    if row < 0:
        raise ValueError(f"Row index must be non-negative, got {row}")
    return f"{column_label(col)}{row + 1}"


def parse_cell_address(address: str) -> tuple[int, int]:
    """'B3' -> (2, 1) as (row, col)."""
    m = _ADDRESS_RE.match(address.strip()) if isinstance(address, str) else None
    if m is None:
        raise ValueError(f"Invalid cell address: {address!r}")
    letters, digits = m.groups()
    return int(digits) - 1, column_index(letters)
