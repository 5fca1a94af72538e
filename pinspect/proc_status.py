# proc_status.py — identity, credentials and memory figures from /proc/<pid>/status

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable

from pinspect.errors import from_os_error
from pinspect.util import PROC_ROOT, STATE_UNKNOWN, PathLike, char_to_state, proc_path


@dataclass
class ProcessInfo:
    pid: int
    name: str = ""
    state: str = STATE_UNKNOWN
    ppid: int = 0
    uid_real: int = 0
    uid_effective: int = 0
    gid_real: int = 0
    gid_effective: int = 0
    vm_size_kb: int = 0
    vm_rss_kb: int = 0
    vm_peak_kb: int = 0
    thread_count: int = 0

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


_KB_FIELDS = {"VmSize": "vm_size_kb", "VmRSS": "vm_rss_kb", "VmPeak": "vm_peak_kb"}


def parse_status(lines: Iterable[str], info: ProcessInfo) -> ProcessInfo:
    # zombies and kernel threads have no Vm* lines; those stay 0
    for line in lines:
        if ":" not in line:
            continue
        key, val = line.split(":", 1)
        val = val.strip()
        fields = val.split()
        try:
            if key == "Name":
                info.name = val
            elif key == "State" and val:
                info.state = char_to_state(val[0])
            elif key == "PPid":
                info.ppid = int(val)
            elif key == "Uid" and len(fields) >= 2:
                info.uid_real, info.uid_effective = int(fields[0]), int(fields[1])
            elif key == "Gid" and len(fields) >= 2:
                info.gid_real, info.gid_effective = int(fields[0]), int(fields[1])
            elif key in _KB_FIELDS and fields:
                setattr(info, _KB_FIELDS[key], int(fields[0]))
            elif key == "Threads":
                info.thread_count = int(val)
        except ValueError:
            continue
    return info


def read_proc_status(pid: int, proc_root: PathLike = PROC_ROOT) -> ProcessInfo:
    path = proc_path(pid, "status", proc_root=proc_root)
    try:
        with path.open("r", encoding="utf-8", errors="replace") as f:
            return parse_status(f, ProcessInfo(pid))
    except OSError as e:
        raise from_os_error(e, str(path)) from e
