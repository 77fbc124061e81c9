#
# Copyright (c) Granulate. All rights reserved.
# Licensed under the AGPL3 License. See LICENSE.md in the project root for license information.
#
import logging
import os
import sys
from typing import List, Optional

import configargparse
import humanfriendly

from cgroupmem import __version__
from cgroupmem.cgroups import MEMORY_CGROUP_ROOT, PROC_ROOT, Cgroup, get_process_cgroups
from cgroupmem.exceptions import CgroupParseError
from cgroupmem.log import initial_root_logger_setup
from cgroupmem.types import nonnegative_integer, pids_list, positive_integer

DEFAULT_LOG_MAX_SIZE = 1024 * 1024 * 5
DEFAULT_LOG_BACKUP_COUNT = 1

logger: logging.LoggerAdapter


def parse_cmd_args(argv: Optional[List[str]] = None) -> configargparse.Namespace:
    parser = configargparse.ArgumentParser(
        description="Show the memory cgroups of processes, and the memory limit configured for them.",
        auto_env_var_prefix="cgroupmem_",
        add_config_file_help=True,
        add_env_var_help=False,
        default_config_files=["/etc/cgroupmem/config.ini"],
    )
    parser.add_argument("--config", is_config_file=True, help="Config file path")
    parser.add_argument(
        "pids",
        nargs="*",
        type=positive_integer,
        help="PIDs of processes to inspect (default: this process)",
    )
    parser.add_argument(
        "--pids",
        type=pids_list,
        dest="pids_list",
        default=[],
        help="Comma separated list of PIDs to inspect, in addition to the positional ones",
    )
    parser.add_argument(
        "--proc-root",
        type=str,
        default=PROC_ROOT,
        help="Mount point of procfs (default: %(default)s)",
    )
    parser.add_argument(
        "--memory-cgroup-root",
        type=str,
        default=MEMORY_CGROUP_ROOT,
        help="Mount point of the cgroups v1 memory hierarchy (default: %(default)s)",
    )
    parser.add_argument(
        "-H",
        "--human-readable",
        action="store_true",
        default=False,
        help="Print memory limits in human readable sizes (e.g 1 GiB)",
    )

    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument("-v", "--verbose", action="store_true", default=False, dest="verbose")

    logging_options = parser.add_argument_group("logging")
    logging_options.add_argument("--log-file", action="store", type=str, dest="log_file", default=None)
    logging_options.add_argument(
        "--log-rotate-max-size",
        action="store",
        type=positive_integer,
        dest="log_rotate_max_size",
        default=DEFAULT_LOG_MAX_SIZE,
    )
    logging_options.add_argument(
        "--log-rotate-backup-count",
        action="store",
        type=nonnegative_integer,
        dest="log_rotate_backup_count",
        default=DEFAULT_LOG_BACKUP_COUNT,
    )

    args = parser.parse_args(argv)
    args.pids = args.pids + args.pids_list
    return args


def format_cgroup(pid: int, cgroup: Cgroup, human_readable: bool) -> str:
    if cgroup.cgroup_mem_max == 0:
        limit = "unset"
    elif human_readable and cgroup.cgroup_mem_max > 0:
        limit = humanfriendly.format_size(cgroup.cgroup_mem_max, binary=True)
    else:
        limit = str(cgroup.cgroup_mem_max)
    return f"{pid} {cgroup.hierarchy_id} {','.join(cgroup.controllers)} {cgroup.path} {limit}"


def print_process_cgroups(pid: int, args: configargparse.Namespace) -> bool:
    """
    Prints the memory cgroups of process 'pid', read from args.proc_root. Returns False if they could not be read.
    """
    try:
        cgroups = get_process_cgroups(pid, proc_root=args.proc_root, memory_cgroup_root=args.memory_cgroup_root)
    except (OSError, CgroupParseError) as e:
        logger.error(f"Could not read cgroups of process {pid}: {e}")
        return False

    logger.debug(f"Found {len(cgroups)} memory cgroups", extra={"pid": pid})
    for cgroup in cgroups:
        print(format_cgroup(pid, cgroup, args.human_readable))
    return True


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_cmd_args(argv)

    global logger
    logger = initial_root_logger_setup(
        logging.DEBUG if args.verbose else logging.INFO,
        args.log_file,
        args.log_rotate_max_size,
        args.log_rotate_backup_count,
    )
    logger.debug(f"Running cgroupmem (version {__version__})")

    success = True
    try:
        # pids may be of the pid namespace of --proc-root, so they are not looked up with psutil.
        for pid in args.pids or [os.getpid()]:
            if not print_process_cgroups(pid, args):
                success = False
    except KeyboardInterrupt:
        pass
    except Exception:
        logger.exception("Unexpected error occurred")
        sys.exit(1)

    if not success:
        sys.exit(1)


if __name__ == "__main__":
    main()
