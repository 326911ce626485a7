from __future__ import annotations

import os
import sys
from typing import Callable, Iterable, Iterator

KeySource = Callable[[], int]


def _posix_getch() -> int:
    import termios
    import tty

    fd = sys.stdin.fileno()
    if not os.isatty(fd):
        data = os.read(fd, 1)
        return data[0] if data else 0
    old_settings = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        data = os.read(fd, 1)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)
    if data == b"\x03":
        raise KeyboardInterrupt
    return data[0] if data else 0


def _windows_getch() -> int:
    import msvcrt

    data = msvcrt.getch()
    if data == b"\x03":
        raise KeyboardInterrupt
    return data[0]


def getch() -> int:
    """Block until one keystroke is available and return its byte value."""
    if os.name == "nt":
        return _windows_getch()
    return _posix_getch()


def input_reader(data: Iterable[int]) -> KeySource:
    """Serve prepared bytes one by one, then zeros once they run out."""
    values: Iterator[int] = iter(list(data))

    def read() -> int:
        return next(values, 0) & 0xFF

    return read


def to_input_bytes(data: str) -> list[int]:
    return [ord(ch) for ch in data]


__all__ = ["KeySource", "getch", "input_reader", "to_input_bytes"]
