# proc_fd.py — enumerate /proc/<pid>/fd and classify each descriptor's target

import logging
import os
from dataclasses import dataclass
from typing import List, Sequence

from pinspect import codec
from pinspect.errors import ResourceExhausted, from_os_error
from pinspect.util import PROC_ROOT, PathLike, is_numeric, proc_path

logger = logging.getLogger(__name__)


@dataclass
class DescriptorEntry:
    number: int
    target: str
    is_socket: bool = False
    socket_inode: int = 0

    @classmethod
    def from_target(cls, number: int, target: str) -> "DescriptorEntry":
        inode = codec.parse_socket_inode(target)
        if inode is None:
            return cls(number, target)
        return cls(number, target, True, inode)

    @property
    def kind(self) -> str:
        if self.is_socket:
            return "socket"
        if self.target.startswith("pipe:["):
            return "pipe"
        if self.target.startswith("anon_inode:"):
            return "anon_inode"
        return "file"


def enumerate_fds(pid: int, proc_root: PathLike = PROC_ROOT) -> List[DescriptorEntry]:
    """Return the open descriptors of pid in directory order.

    Raises NotFound / PermissionDenied if the fd directory cannot be listed
    and ResourceExhausted on allocation failure. A descriptor that closes
    between listing and readlink is left out.
    """
    fd_dir = proc_path(pid, "fd", proc_root=proc_root)
    entries: List[DescriptorEntry] = []
    try:
        with os.scandir(fd_dir) as it:
            for dent in it:
                if not is_numeric(dent.name):
                    continue
                try:
                    target = os.readlink(dent.path)
                except OSError as e:
                    logger.debug("pid %s fd %s vanished before readlink: %s", pid, dent.name, e)
                    continue
                entries.append(DescriptorEntry.from_target(int(dent.name), target))
    except MemoryError:
        raise ResourceExhausted(f"enumerating {fd_dir}") from None
    except OSError as e:
        raise from_os_error(e, str(fd_dir)) from e
    return entries


def socket_inodes(entries: Sequence[DescriptorEntry]) -> List[int]:
    return [e.socket_inode for e in entries if e.is_socket]

