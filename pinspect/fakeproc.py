# fakeproc.py — test support: builds throwaway /proc trees for the test_*.py modules.
# Nothing in the runtime code imports it.

import errno
import io
import os
import sys
from pathlib import Path
from typing import Dict, Iterable, Optional

TABLE_HEADER = ("  sl  local_address rem_address   st tx_queue rx_queue tr tm->when "
                "retrnsmt   uid  timeout inode\n")

def host_hex(a: int, b: int, c: int, d: int) -> str:
    # how this host's kernel would print a.b.c.d in /proc/net/tcp
    return "%08X" % int.from_bytes(bytes([a, b, c, d]), sys.byteorder)

def table_row(slot: int, local: str, remote: str, state: str, inode: int, uid: int = 1000) -> str:
    return (f"{slot:4d}: {local} {remote} {state} 00000000:00000000 00:00000000 "
            f"00000000 {uid:5d}        0 {inode} 1 0000000000000000 100 0 0 10 0\n")

class EioAfterHeader(io.StringIO):
    # a connection table whose read fails once the header has been consumed
    def __init__(self):
        super().__init__(TABLE_HEADER)
        self.lines_read = 0

    def __next__(self):
        self.lines_read += 1
        if self.lines_read > 1:
            raise OSError(errno.EIO, "Input/output error")
        return super().__next__()

class FakeProc:
    def __init__(self, root: str):
        self.root = Path(root)

    def add_fds(self, pid: int, targets: Dict[int, str]) -> Path:
        fd_dir = self.root / str(pid) / "fd"
        fd_dir.mkdir(parents=True, exist_ok=True)
        for num, target in targets.items():
            os.symlink(target, fd_dir / str(num))
        return fd_dir

    def add_status(self, pid: int, text: str) -> Path:
        d = self.root / str(pid)
        d.mkdir(parents=True, exist_ok=True)
        (d / "status").write_text(text)
        return d / "status"

    def add_thread(self, pid: int, tid: int, name: Optional[str], state: Optional[str]) -> Path:
        d = self.root / str(pid) / "task" / str(tid)
        d.mkdir(parents=True, exist_ok=True)
        if name is not None:
            (d / "comm").write_text(name + "\n")
        if state is not None:
            (d / "status").write_text(f"Name:\t{name}\nState:\t{state}\n")
        return d

    def add_table(self, protocol: str, rows: Iterable[str], header: bool = True) -> Path:
        d = self.root / "net"
        d.mkdir(parents=True, exist_ok=True)
        path = d / protocol.lower()
        path.write_text((TABLE_HEADER if header else "") + "".join(rows))
        return path
