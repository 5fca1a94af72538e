#!/usr/bin/env python3
# cli.py — one-shot process report: identity, FDs, threads and IPv4 connections
# Usage examples:
#   pinspect 1234
#   pinspect -v $$
#   pinspect -n $(pgrep -o nginx)
#   pinspect --json 1234
#   PINSPECT_PROC_ROOT=/host/proc pinspect 1

import argparse
import json
import logging
import sys
from typing import Any, Callable, Dict, List, Optional

from pinspect import __version__
from pinspect.errors import InspectError, NotFound
from pinspect.net import find_process_sockets
from pinspect.proc_fd import enumerate_fds
from pinspect.proc_status import ProcessInfo, read_proc_status
from pinspect.proc_task import enumerate_threads
from pinspect.util import default_proc_root, parse_pid, state_to_string

PROG = "pinspect"

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_NOT_FOUND = 2
EXIT_UNREADABLE = 3

logger = logging.getLogger(__name__)

# ---------------- collection ----------------

def attempt(what: str, fn: Callable[..., Any], *args, **kwargs) -> Dict[str, Any]:
    # one report section: either {"items": [...]} or {"error": "<reason>"}
    try:
        return {"items": fn(*args, **kwargs)}
    except InspectError as e:
        logger.debug("%s: %s", what, e)
        return {"error": e.reason}

def collect(pid: int, proc_root: str, network_only: bool, threads: bool) -> Dict[str, Any]:
    """Gather every report section. Only the status record is mandatory."""
    info = read_proc_status(pid, proc_root=proc_root)
    snap: Dict[str, Any] = {"process": info}
    if not network_only:
        snap["fds"] = attempt("file descriptors", enumerate_fds, pid, proc_root=proc_root)
        if threads:
            snap["threads"] = attempt("threads", enumerate_threads, pid, proc_root=proc_root)
    snap["sockets"] = attempt("network connections", find_process_sockets, pid, proc_root=proc_root)
    return snap

# ---------------- printing ----------------

def print_process(info: ProcessInfo):
    print(f"{'Process:':<10} {info.name} (PID {info.pid})")
    print(f"{'State:':<10} {state_to_string(info.state)}")
    print(f"{'UID:':<10} {info.uid_real} (real), {info.uid_effective} (effective)")
    print(f"Memory:    VmSize: {info.vm_size_kb} KB, VmRSS: {info.vm_rss_kb} KB, VmPeak: {info.vm_peak_kb} KB")
    print(f"Threads:   {info.thread_count}")

def print_fds(section: Dict[str, Any], verbose: bool):
    print()
    if "error" in section:
        print(f"File Descriptors: unable to determine ({section['error']})")
        return
    fds = section["items"]
    print(f"File Descriptors: {len(fds)} open")
    if verbose and fds:
        print()
        print("  FD    Type        Target")
        print("  ----  ----------  ----------------------------------------")
        for fd in sorted(fds, key=lambda e: e.number):
            print(f"  {fd.number:<4d}  {fd.kind:<10}  {fd.target}")

def print_threads(section: Dict[str, Any]):
    print()
    if "error" in section:
        print(f"Threads: unable to enumerate ({section['error']})")
        return
    print("Thread Details:")
    print("  TID     State       Name")
    print("  ------  ----------  ----------------")
    for t in sorted(section["items"], key=lambda t: t.tid):
        print(f"  {t.tid:<6d}  {state_to_string(t.state):<10}  {t.name}")

def print_sockets(section: Dict[str, Any], verbose: bool):
    print()
    if "error" in section:
        print(f"Network Connections: unable to determine ({section['error']})")
        return
    socks = section["items"]
    print(f"Network Connections: {len(socks)} open")
    if verbose and socks:
        print()
        print("  Proto  Local Address          Remote Address         State")
        print("  -----  ---------------------  ---------------------  -----------")
        for s in socks:
            print(f"  {s.protocol:<5}  {s.local:<21}  {s.remote:<21}  {s.state_label}")

def print_human(snap: Dict[str, Any], verbose: bool, network_only: bool):
    if not network_only:
        print_process(snap["process"])
        print_fds(snap["fds"], verbose)
        if "threads" in snap:
            print_threads(snap["threads"])
    print_sockets(snap["sockets"], verbose)

def to_json(snap: Dict[str, Any]) -> Dict[str, Any]:
    def section(sec: Optional[Dict[str, Any]], row: Callable[[Any], Dict[str, Any]]) -> Any:
        if sec is None:
            return None
        if "error" in sec:
            return {"error": sec["error"]}
        return [row(x) for x in sec["items"]]

    info = snap["process"]
    doc = info.as_dict()
    doc["state"] = state_to_string(info.state)
    return {
        "process": doc,
        "fds": section(snap.get("fds"), lambda e: {"fd": e.number, "type": e.kind, "target": e.target}),
        "threads": section(snap.get("threads"), lambda t: {"tid": t.tid, "name": t.name, "state": state_to_string(t.state)}),
        "sockets": section(snap.get("sockets"), lambda s: s.as_dict()),
    }

def print_json(d: Dict[str, Any]):
    json.dump(d, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    sys.stdout.flush()

# ---------------- main ----------------

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog=PROG, description="Inspect a Linux process via the /proc filesystem.")
    ap.add_argument("pid", help="PID to inspect")
    ap.add_argument("-v", "--verbose", action="store_true", help="show descriptor, thread and connection tables")
    ap.add_argument("-n", "--network", action="store_true", help="show network connections only")
    ap.add_argument("--json", action="store_true", help="output one JSON document")
    ap.add_argument("--proc-root", default=default_proc_root(),
                    help="procfs mount point (default: $PINSPECT_PROC_ROOT or /proc)")
    ap.add_argument("--debug", action="store_true", help="log skipped entries to stderr")
    ap.add_argument("-V", "--version", action="version", version=f"{PROG} version {__version__}")
    return ap

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(name)s: %(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        pid = parse_pid(args.pid)
    except ValueError:
        print(f"Invalid PID: {args.pid}", file=sys.stderr)
        print(f"Try '{PROG} --help' for more information.", file=sys.stderr)
        return EXIT_USAGE

    try:
        snap = collect(pid, args.proc_root, network_only=args.network, threads=args.verbose or args.json)
    except KeyboardInterrupt:
        return 130
    except NotFound as e:
        print(f"{PROG}: cannot read process {pid}: {e.reason}", file=sys.stderr)
        return EXIT_NOT_FOUND
    except InspectError as e:
        print(f"{PROG}: cannot read process {pid}: {e.reason}", file=sys.stderr)
        return EXIT_UNREADABLE

    if args.json:
        print_json(to_json(snap))
    else:
        print_human(snap, verbose=args.verbose, network_only=args.network)
    return EXIT_OK

if __name__ == "__main__":
    sys.exit(main())
