#
# Copyright (c) Granulate. All rights reserved.
# Licensed under the AGPL3 License. See LICENSE.md in the project root for license information.
#
from pathlib import Path
from typing import Union


def read_file_no_stat(path: Union[str, Path]) -> bytes:
    """
    Reads the entire content of 'path'.
    Files in procfs and sysfs report a size of 0 in stat(); read_bytes() reads until EOF regardless of the
    reported size, so it is safe for those pseudo-files.
    """
    return Path(path).read_bytes()
