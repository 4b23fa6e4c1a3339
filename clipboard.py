import subprocess
from typing import Optional


class ClipboardUnavailable(Exception):
    pass


def copy_text(command: Optional[list[str]], text: str) -> None:
    """Pipe ``text`` into the configured clipboard command (e.g. ``["wl-copy"]``)."""
    if not command:
        raise ClipboardUnavailable("no clipboard command configured")
    subprocess.run(command, input=text, text=True, check=True)
