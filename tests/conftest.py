#
# Copyright (c) Granulate. All rights reserved.
# Licensed under the AGPL3 License. See LICENSE.md in the project root for license information.
#
import logging
from pathlib import Path
from typing import Callable, Iterator

from pytest import fixture


@fixture
def proc_root(tmp_path: Path) -> Path:
    path = tmp_path / "proc"
    path.mkdir()
    return path


@fixture
def memory_cgroup_root(tmp_path: Path) -> Path:
    path = tmp_path / "sys" / "fs" / "cgroup" / "memory"
    path.mkdir(parents=True)
    return path


@fixture
def write_proc_cgroup(proc_root: Path) -> Callable[[int, str], Path]:
    """
    Creates <proc_root>/<pid>/cgroup with the given content.
    """

    def write(pid: int, content: str) -> Path:
        pid_dir = proc_root / str(pid)
        pid_dir.mkdir(exist_ok=True)
        cgroup_file = pid_dir / "cgroup"
        cgroup_file.write_text(content)
        return cgroup_file

    return write


@fixture
def write_memory_limit(memory_cgroup_root: Path) -> Callable[[str, str], Path]:
    """
    Creates memory.limit_in_bytes with the given content, for the cgroup path (e.g "/docker/abc") given.
    """

    def write(cgroup_path: str, content: str) -> Path:
        cgroup_dir = memory_cgroup_root / cgroup_path.lstrip("/")
        cgroup_dir.mkdir(parents=True, exist_ok=True)
        limit_file = cgroup_dir / "memory.limit_in_bytes"
        limit_file.write_text(content)
        return limit_file

    return write


@fixture(autouse=True)
def reset_cgroupmem_logger() -> Iterator[None]:
    yield
    # main() installs handlers on the package logger, don't let them leak between tests.
    logger = logging.getLogger("cgroupmem")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
