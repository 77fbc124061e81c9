#
# Copyright (c) Granulate. All rights reserved.
# Licensed under the AGPL3 License. See LICENSE.md in the project root for license information.
#
"""
Parsing of /proc/[pid]/cgroup, see "/proc/[pid]/cgroup" in http://man7.org/linux/man-pages/man7/cgroups.7.html
"""
import os
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from cgroupmem.exceptions import InvalidHierarchyIdError, MalformedCgroupLineError
from cgroupmem.log import get_logger_adapter
from cgroupmem.utils.fs import read_file_no_stat
from cgroupmem.utils.process import ProcessHandle, proc_pid_path

logger = get_logger_adapter(__name__)

PROC_ROOT = "/proc"
MEMORY_CGROUP_ROOT = "/sys/fs/cgroup/memory"  # TODO extract from /proc/mounts, this may change
MEMORY_CONTROLLER = "memory"
MEMORY_LIMIT_FILE = "memory.limit_in_bytes"

DECIMAL_RE = re.compile(r"[+-]?[0-9]+")
INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1


@dataclass(frozen=True)
class Cgroup:
    """
    The placement of a process inside a specific control hierarchy, one line of /proc/[pid]/cgroup.
    Prefixing 'path' with the mount point of this specific hierarchy locates the pseudo-files that
    read/set the data of the process in this hierarchy.
    """

    # Can be matched to a named hierarchy using /proc/cgroups. Always 0 for cgroups v2, which only has one hierarchy.
    hierarchy_id: int
    # Also known as subsystems. May be empty for cgroups v2, as all active controllers use the same hierarchy.
    controllers: Tuple[str, ...] = ()
    # Relative to the mount point of the cgroupfs representing this specific hierarchy.
    path: str = ""
    # memory.limit_in_bytes of the memory hierarchy, 0 if not available.
    cgroup_mem_max: int = 0


def _parse_decimal(text: str) -> int:
    # int() alone also accepts surrounding whitespace, underscores and non-ASCII digits
    if DECIMAL_RE.fullmatch(text) is None:
        raise ValueError(f"invalid decimal integer {text!r}")
    return int(text, 10)


def _parse_int64(text: str) -> int:
    value = _parse_decimal(text)
    if not INT64_MIN <= value <= INT64_MAX:
        raise ValueError(f"value {text!r} is out of int64 range")
    return value


def read_memory_limit(cgroup_path: str, memory_cgroup_root: str = MEMORY_CGROUP_ROOT) -> Optional[int]:
    """
    Reads memory.limit_in_bytes of a cgroup in the memory hierarchy.
    Returns None if the file does not exist, or can't be read or parsed.
    """
    # cgroup_path is absolute, os.path.join() would discard the root.
    limit_path = f"{memory_cgroup_root}{cgroup_path}/{MEMORY_LIMIT_FILE}"
    if not os.path.exists(limit_path):
        return None

    try:
        return _parse_int64(read_file_no_stat(limit_path).decode().strip())
    except (OSError, ValueError) as e:
        logger.debug(f"Could not read memory limit of cgroup: {e!r}", extra={"limit_path": limit_path})
        return None


def parse_cgroup_line(line: str, memory_cgroup_root: str = MEMORY_CGROUP_ROOT) -> Cgroup:
    """
    Parses one line of /proc/[pid]/cgroup, formatted hierarchy-ID:controller1,controller2:path
    """
    fields = line.split(":")
    if len(fields) < 3:
        raise MalformedCgroupLineError(line, len(fields))

    hierarchy_id_str, controllers_str, path = fields[0], fields[1], fields[2]

    # only a hierarchy dedicated to the memory controller has the limit file at this location.
    cgroup_mem_max = 0
    if controllers_str == MEMORY_CONTROLLER:
        cgroup_mem_max = read_memory_limit(path, memory_cgroup_root) or 0

    try:
        hierarchy_id = _parse_int64(hierarchy_id_str)
    except ValueError as e:
        raise InvalidHierarchyIdError(line, hierarchy_id_str) from e

    controllers = tuple(controllers_str.split(",")) if controllers_str != "" else ()

    return Cgroup(
        hierarchy_id=hierarchy_id,
        controllers=controllers,
        path=path,
        cgroup_mem_max=cgroup_mem_max,
    )


def _split_lines(text: str) -> List[str]:
    lines = text.split("\n")
    if lines[-1] == "":
        # no record after the final newline (or in empty input)
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def parse_cgroups(data: bytes, memory_cgroup_root: str = MEMORY_CGROUP_ROOT) -> List[Cgroup]:
    """
    Parses the content of /proc/[pid]/cgroup, keeping only the cgroups whose first controller is memory.
    Raises on the first malformed line.
    """
    cgroups = []
    for line in _split_lines(os.fsdecode(data)):
        cgroup = parse_cgroup_line(line, memory_cgroup_root)
        if cgroup.controllers[:1] != (MEMORY_CONTROLLER,):
            continue
        cgroups.append(cgroup)
    return cgroups


def get_process_cgroups(
    process: ProcessHandle,
    proc_root: str = PROC_ROOT,
    memory_cgroup_root: str = MEMORY_CGROUP_ROOT,
) -> List[Cgroup]:
    """
    Get the memory cgroups of a process, with their memory limit.

    Unlike the full /proc/[pid]/cgroup, only hierarchies whose first controller is memory are returned - so on
    a cgroups v1 system this is usually a single cgroup, and on a pure cgroups v2 system it is empty.
    Errors reading /proc/[pid]/cgroup (e.g the process has exited) are raised as is.
    """
    data = read_file_no_stat(proc_pid_path(process, "cgroup", proc_root))
    return parse_cgroups(data, memory_cgroup_root)
