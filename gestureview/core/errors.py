from __future__ import annotations


class GestureViewError(Exception):
    """Base class for errors raised at the edges (profiles, logs, devices)."""


class ProfileError(GestureViewError, ValueError):
    pass


class SessionFormatError(GestureViewError, ValueError):
    def __init__(self, path, line_no: int, reason: str) -> None:
        super().__init__(f"{path}:{line_no}: {reason}")
        self.path = path
        self.line_no = line_no
        self.reason = reason


class DeviceNotFoundError(GestureViewError, RuntimeError):
    pass
