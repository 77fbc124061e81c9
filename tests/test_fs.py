#
# Copyright (c) Granulate. All rights reserved.
# Licensed under the AGPL3 License. See LICENSE.md in the project root for license information.
#
from pathlib import Path

import pytest

from cgroupmem.utils.fs import read_file_no_stat
from cgroupmem.utils.process import proc_pid_path


@pytest.mark.parametrize(
    "size",
    [
        pytest.param(0, id="empty"),
        pytest.param(10, id="small"),
        pytest.param(4096, id="one-page"),
        pytest.param(4096 * 3 + 17, id="several-pages"),
    ],
)
def test_read_file_no_stat(tmp_path: Path, size: int) -> None:
    content = bytes(i % 251 for i in range(size))
    path = tmp_path / "file"
    path.write_bytes(content)

    assert read_file_no_stat(path) == content
    assert read_file_no_stat(str(path)) == content


def test_read_file_no_stat_missing(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        read_file_no_stat(tmp_path / "missing")


@pytest.mark.skipif(not Path("/proc/self/status").exists(), reason="requires procfs")
def test_read_file_no_stat_pseudo_file() -> None:
    # procfs reports a size of 0 for this file
    assert Path("/proc/self/status").stat().st_size == 0
    assert read_file_no_stat("/proc/self/status").startswith(b"Name:\t")


def test_proc_pid_path() -> None:
    assert proc_pid_path(123, "cgroup") == "/proc/123/cgroup"
    assert proc_pid_path(123, "cgroup", "/host/proc") == "/host/proc/123/cgroup"
