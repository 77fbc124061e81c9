#
# Copyright (c) Granulate. All rights reserved.
# Licensed under the AGPL3 License. See LICENSE.md in the project root for license information.
#
from typing import List

import configargparse


def positive_integer(value_str: str) -> int:
    value = int(value_str)
    if value <= 0:
        raise configargparse.ArgumentTypeError("invalid positive integer value: {!r}".format(value))
    return value


def nonnegative_integer(value_str: str) -> int:
    value = int(value_str)
    if value < 0:
        raise configargparse.ArgumentTypeError("invalid non-negative integer value: {!r}".format(value))
    return value


def pids_list(value_str: str) -> List[int]:
    try:
        return [positive_integer(pid) for pid in value_str.split(",")]
    except (ValueError, configargparse.ArgumentTypeError):
        raise configargparse.ArgumentTypeError(
            f"invalid PID list {value_str!r}: should be a single PID, or comma separated list of PIDs f.e. 13,452,2388"
        )
