# errors.py — failure kinds raised while inspecting a process through /proc

import errno
from typing import Optional


class InspectError(Exception):
    """Base class for everything pinspect raises on purpose."""

    reason = "error"

    def __init__(self, message: str = "", reason: Optional[str] = None):
        super().__init__(message or self.reason)
        if reason is not None:
            self.reason = reason


class NotFound(InspectError):
    reason = "process not found"


class PermissionDenied(InspectError):
    reason = "permission denied"


class Unavailable(InspectError):
    reason = "kernel interface unavailable"


class ResourceExhausted(InspectError):
    reason = "out of memory"


class FormatError(InspectError, ValueError):
    reason = "malformed input"


def from_os_error(exc: OSError, what: str) -> InspectError:
    """Map an OSError raised while opening a per-process /proc entry."""
    code = exc.errno
    if code in (errno.ENOENT, errno.ESRCH, errno.ENOTDIR):
        return NotFound(f"{what}: {exc.strerror or 'no such process'}")
    if code in (errno.EACCES, errno.EPERM):
        return PermissionDenied(f"{what}: {exc.strerror or 'permission denied'}")
    if code == errno.ENOMEM:
        return ResourceExhausted(f"{what}: {exc.strerror or 'out of memory'}")
    return InspectError(f"{what}: {exc}", reason=(exc.strerror or "error").lower())
