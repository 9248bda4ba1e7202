"""Cross-platform keyboard input handler for the interactive timer."""

import sys
from typing import Optional

# Raw bytes -> key names understood by FocusApp.handle_key
SPECIAL_KEYS = {
    "\r": "enter",
    "\n": "enter",
    "\t": "tab",
    "\x7f": "backspace",
    "\x08": "backspace",
    "\x1b": "esc",
}

ARROW_KEYS = {"A": "up", "B": "down", "C": "right", "D": "left"}


def normalize_key(raw: str) -> str:
    """Translate a raw key sequence into a key name (or the character)."""
    if raw.startswith("\x1b[") and len(raw) == 3:
        return ARROW_KEYS.get(raw[2], "esc")
    return SPECIAL_KEYS.get(raw, raw)


class KeyboardHandler:
    """Keyboard handler for POSIX terminals (cbreak mode + select)."""

    def __init__(self):
        import termios
        import tty

        self._termios = termios
        self.fd = sys.stdin.fileno()
        self.old_settings = termios.tcgetattr(self.fd)
        tty.setcbreak(self.fd)

    def _ready(self, timeout: float) -> bool:
        import select

        return bool(select.select([sys.stdin], [], [], timeout)[0])

    def get_key(self, timeout: float = 0.0) -> Optional[str]:
        """
        Wait up to *timeout* seconds for a keypress.

        Returns the key name or None if nothing was pressed.
        """
        if not self._ready(timeout):
            return None

        raw = sys.stdin.read(1)
        if raw == "\x1b" and self._ready(0.01):
            raw += sys.stdin.read(2)
        return normalize_key(raw)

    def stop(self):
        """Restore terminal settings."""
        self._termios.tcsetattr(self.fd, self._termios.TCSADRAIN, self.old_settings)


class WindowsKeyboardHandler:
    """Keyboard handler for Windows using msvcrt."""

    def __init__(self):
        import msvcrt

        self.msvcrt = msvcrt

    def get_key(self, timeout: float = 0.0) -> Optional[str]:
        """Poll for a key until *timeout* elapses."""
        import time

        deadline = time.monotonic() + timeout
        while True:
            if self.msvcrt.kbhit():
                key = self.msvcrt.getwch()
                if key in ("\x00", "\xe0"):
                    code = self.msvcrt.getwch()
                    return {"H": "up", "P": "down", "K": "left", "M": "right"}.get(
                        code
                    )
                return normalize_key(key)
            if time.monotonic() >= deadline:
                return None
            time.sleep(0.01)

    def stop(self):
        """No cleanup needed on Windows."""
        pass


def create_keyboard_handler():
    """Return the handler matching the current platform."""
    if sys.platform == "win32":
        return WindowsKeyboardHandler()
    return KeyboardHandler()
