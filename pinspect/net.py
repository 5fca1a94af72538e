# net.py — attribute /proc/net/{tcp,udp} connections to a process by socket inode
#
# The fd directory is read first, the connection tables second. Nothing ties
# the two reads together, so a socket opened or closed in between may be
# missed; the result is a best-effort snapshot.

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from pinspect import codec
from pinspect.errors import FormatError, Unavailable
from pinspect.proc_fd import enumerate_fds, socket_inodes
from pinspect.util import PROC_ROOT, PathLike

logger = logging.getLogger(__name__)

# sl local_address rem_address st tx_queue:rx_queue tr:tm->when retrnsmt uid timeout inode ...
COL_LOCAL = 1
COL_REMOTE = 2
COL_STATE = 3
COL_UID = 7
COL_INODE = 9
MIN_COLUMNS = 10


@dataclass
class ConnectionRecord:
    protocol: str
    local_address: int
    local_port: int
    remote_address: int
    remote_port: int
    state: int
    inode: int
    uid: Optional[int] = None


@dataclass
class SocketInfo:
    is_tcp: bool
    local_address: int
    local_port: int
    remote_address: int
    remote_port: int
    state: int
    inode: int

    @classmethod
    def from_record(cls, rec: ConnectionRecord) -> "SocketInfo":
        return cls(
            is_tcp=rec.protocol == codec.TCP,
            local_address=rec.local_address,
            local_port=rec.local_port,
            remote_address=rec.remote_address,
            remote_port=rec.remote_port,
            state=rec.state,
            inode=rec.inode,
        )

    @property
    def protocol(self) -> str:
        return codec.TCP if self.is_tcp else codec.UDP

    @property
    def state_label(self) -> str:
        return codec.state_label(self.protocol, self.state)

    @property
    def local(self) -> str:
        return codec.format_ip_port(self.local_address, self.local_port)

    @property
    def remote(self) -> str:
        return codec.format_ip_port(self.remote_address, self.remote_port)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "proto": self.protocol,
            "local": self.local,
            "remote": self.remote,
            "state": self.state_label,
            "inode": self.inode,
        }


def table_path(protocol: str, proc_root: PathLike = PROC_ROOT) -> Path:
    return Path(proc_root, "net", protocol.lower())


def parse_table_line(line: str, protocol: str, inodes: Sequence[int]) -> Optional[ConnectionRecord]:
    """Parse one data line; None if it is short, malformed or not one of inodes."""
    parts = line.split()
    if len(parts) < MIN_COLUMNS:
        return None
    try:
        inode = int(parts[COL_INODE], 10)
    except ValueError:
        return None
    # linear scan; a process rarely holds more than a few dozen sockets
    if inode not in inodes:
        return None
    local_address, local_port = codec.decode_address_token(parts[COL_LOCAL])
    remote_address, remote_port = codec.decode_address_token(parts[COL_REMOTE])
    try:
        state = int(parts[COL_STATE], 16)
    except ValueError:
        raise FormatError(f"bad state field {parts[COL_STATE]!r}") from None
    try:
        uid: Optional[int] = int(parts[COL_UID], 10)
    except ValueError:
        uid = None
    return ConnectionRecord(protocol, local_address, local_port,
                            remote_address, remote_port, state, inode, uid)


def read_connection_table(path: PathLike, protocol: str, inodes: Sequence[int]) -> List[ConnectionRecord]:
    """Return the rows of a /proc/net table whose inode is in inodes, in file order.

    An empty inodes sequence returns [] without touching the file. Raises
    Unavailable if the table cannot be opened or read. Short or undecodable lines are
    skipped.
    """
    if not inodes:
        return []
    targets = tuple(inodes)
    records: List[ConnectionRecord] = []
    try:
        with open(path, "r", encoding="ascii", errors="replace") as f:
            next(f, None)  # header
            for lineno, line in enumerate(f, start=2):
                try:
                    rec = parse_table_line(line, protocol, targets)
                except FormatError as e:
                    logger.debug("%s:%d skipped: %s", path, lineno, e)
                    continue
                if rec is not None:
                    records.append(rec)
    except OSError as e:
        raise Unavailable(f"cannot read {path}: {e.strerror or e}") from e
    return records


def find_process_sockets(pid: int, proc_root: PathLike = PROC_ROOT) -> List[SocketInfo]:
    """Return the IPv4 TCP and UDP connections owned by pid, TCP first.

    Propagates NotFound / PermissionDenied / ResourceExhausted from the fd
    scan and Unavailable from either table; never returns a partial merge.
    """
    inodes = socket_inodes(enumerate_fds(pid, proc_root=proc_root))
    if not inodes:
        return []
    tcp = read_connection_table(table_path(codec.TCP, proc_root), codec.TCP, inodes)
    udp = read_connection_table(table_path(codec.UDP, proc_root), codec.UDP, inodes)
    logger.debug("pid %s: %d socket fds, %d tcp, %d udp", pid, len(inodes), len(tcp), len(udp))
    return [SocketInfo.from_record(rec) for rec in tcp + udp]
