# util.py — /proc path helpers, PID validation and process-state labels

import os
from pathlib import Path
from typing import Union

PROC_ROOT = "/proc"

# pid_t is a signed 32-bit int
PID_MAX = 2**31 - 1

PathLike = Union[str, Path]

# ---------------- paths ----------------

def proc_path(pid: int, *parts: str, proc_root: PathLike = PROC_ROOT) -> Path:
    # Does not check that the path exists.
    return Path(proc_root, str(pid), *parts)

def is_numeric(name: str) -> bool:
    # str.isdigit() also accepts non-ASCII digits like "²"
    return bool(name) and name.isascii() and name.isdigit()

# ---------------- pid ----------------

def parse_pid(text: str) -> int:
    """Parse a command-line PID. Raises ValueError for anything but a positive decimal that fits a pid_t."""
    if text is None or not is_numeric(text):
        raise ValueError(f"invalid PID: {text!r}")
    pid = int(text, 10)
    if pid <= 0 or pid > PID_MAX:
        raise ValueError(f"invalid PID: {text!r}")
    return pid

# ---------------- process state ----------------

STATE_RUNNING = "R"
STATE_SLEEPING = "S"
STATE_DISK_SLEEP = "D"
STATE_ZOMBIE = "Z"
STATE_STOPPED = "T"
STATE_IDLE = "I"
STATE_UNKNOWN = "?"

PROC_STATE = {
    STATE_RUNNING: "Running",
    STATE_SLEEPING: "Sleeping",
    STATE_DISK_SLEEP: "Disk Sleep",
    STATE_ZOMBIE: "Zombie",
    STATE_STOPPED: "Stopped",
    STATE_IDLE: "Idle",
}

def char_to_state(c: str) -> str:
    return c if c in PROC_STATE else STATE_UNKNOWN

def state_to_string(state: str) -> str:
    return PROC_STATE.get(state, "Unknown")

def default_proc_root() -> str:
    return os.environ.get("PINSPECT_PROC_ROOT") or PROC_ROOT
