#
# Copyright (c) Granulate. All rights reserved.
# Licensed under the AGPL3 License. See LICENSE.md in the project root for license information.
#
from typing import Union

from psutil import Process

ProcessHandle = Union[Process, int]


def process_pid(process: ProcessHandle) -> int:
    if isinstance(process, Process):
        return process.pid
    assert isinstance(process, int), f"expected a psutil.Process or a pid, got {process!r}"
    return process


def proc_pid_path(process: ProcessHandle, name: str, proc_root: str = "/proc") -> str:
    return f"{proc_root}/{process_pid(process)}/{name}"
