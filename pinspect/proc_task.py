# proc_task.py — threads of a process from /proc/<pid>/task

import errno
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from pinspect.errors import ResourceExhausted, from_os_error
from pinspect.util import PROC_ROOT, STATE_UNKNOWN, PathLike, char_to_state, is_numeric, proc_path

logger = logging.getLogger(__name__)

UNKNOWN_NAME = "???"

_GONE = (errno.ENOENT, errno.ESRCH)


@dataclass
class ThreadInfo:
    tid: int
    name: str = UNKNOWN_NAME
    state: str = STATE_UNKNOWN


def read_thread_name(task_dir: Path) -> Optional[str]:
    # None when the thread has exited
    try:
        with (task_dir / "comm").open("r", encoding="utf-8", errors="replace") as f:
            return f.readline().rstrip("\n") or UNKNOWN_NAME
    except OSError as e:
        logger.debug("%s: no comm: %s", task_dir, e)
        return None if e.errno in _GONE else UNKNOWN_NAME


def read_thread_state(task_dir: Path) -> Optional[str]:
    # None when the thread has exited
    try:
        with (task_dir / "status").open("r", encoding="utf-8", errors="replace") as f:
            for line in f:
                if line.startswith("State:"):
                    val = line.split(":", 1)[1].strip()
                    return char_to_state(val[:1])
    except OSError as e:
        logger.debug("%s: no status: %s", task_dir, e)
        if e.errno in _GONE:
            return None
    return STATE_UNKNOWN


def read_thread(task_dir: Path, tid: int) -> Optional[ThreadInfo]:
    name = read_thread_name(task_dir)
    state = read_thread_state(task_dir)
    if name is None and state is None:
        return None
    return ThreadInfo(tid, name or UNKNOWN_NAME, state or STATE_UNKNOWN)


def enumerate_threads(pid: int, proc_root: PathLike = PROC_ROOT) -> List[ThreadInfo]:
    """List the threads of pid. A thread that exits between listing and reading is left out."""
    task_root = proc_path(pid, "task", proc_root=proc_root)
    threads: List[ThreadInfo] = []
    try:
        with os.scandir(task_root) as it:
            for dent in it:
                if not is_numeric(dent.name):
                    continue
                t = read_thread(Path(dent.path), int(dent.name))
                if t is None:
                    logger.debug("pid %s thread %s exited mid-scan", pid, dent.name)
                    continue
                threads.append(t)
    except MemoryError:
        raise ResourceExhausted(f"enumerating {task_root}") from None
    except OSError as e:
        raise from_os_error(e, str(task_root)) from e
    return threads
