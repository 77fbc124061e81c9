#
# Copyright (c) Granulate. All rights reserved.
# Licensed under the AGPL3 License. See LICENSE.md in the project root for license information.
#
import logging
import logging.handlers
import os
import re
import sys
import time
from logging import LogRecord
from typing import Any, MutableMapping, Optional, Tuple

LOGGER_NAME_RE = re.compile(r"cgroupmem(?:\..+)?")


def get_logger_adapter(logger_name: str) -> logging.LoggerAdapter:
    # Validate the name starts with cgroupmem (the root logger name), so logging parent logger propagation will work.
    assert LOGGER_NAME_RE.match(logger_name) is not None, "logger name must start with 'cgroupmem'"
    return CgroupmemExtraAdapter(logging.getLogger(logger_name), {})


class CgroupmemExtraAdapter(logging.LoggerAdapter):
    """
    Collects the "extra" mapping given to each logging call under a single record attribute, so formatters
    can print it without knowing the keys in advance.
    """

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        extra = {**(self.extra or {}), **kwargs.pop("extra", {})}
        kwargs["extra"] = {"extra": extra}
        return msg, kwargs


class _ExtraFormatter(logging.Formatter):
    def format(self, record: LogRecord) -> str:
        formatted = super().format(record)

        formatted_extra = ", ".join(f"{k}={v}" for k, v in record.__dict__.get("extra", {}).items())
        if formatted_extra:
            formatted = f"{formatted} ({formatted_extra})"

        return formatted


class _UTCFormatter(logging.Formatter):
    # Patch formatTime to be GMT (UTC) for all formatters,
    # see https://docs.python.org/3/library/logging.html?highlight=formattime#logging.Formatter.formatTime
    converter = time.gmtime


class CgroupmemFormatter(_ExtraFormatter, _UTCFormatter):
    pass


def initial_root_logger_setup(
    stream_level: int,
    log_file_path: Optional[str],
    rotate_max_bytes: int,
    rotate_backup_count: int,
) -> logging.LoggerAdapter:
    logger_adapter = get_logger_adapter("cgroupmem")
    logger_adapter.logger.setLevel(logging.DEBUG)

    # the records go to stderr, stdout is where the cgroups listing goes.
    stream_handler = logging.StreamHandler(stream=sys.stderr)
    stream_handler.setLevel(stream_level)
    if stream_level < logging.INFO:
        stream_handler.setFormatter(CgroupmemFormatter("[%(asctime)s] %(levelname)s: %(name)s: %(message)s"))
    else:
        stream_handler.setFormatter(CgroupmemFormatter("[%(asctime)s] %(message)s", "%H:%M:%S"))
    logger_adapter.logger.addHandler(stream_handler)

    if log_file_path is not None:
        os.makedirs(os.path.dirname(log_file_path) or ".", exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file_path,
            maxBytes=rotate_max_bytes,
            backupCount=rotate_backup_count,
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(CgroupmemFormatter("[%(asctime)s] %(levelname)s: %(name)s: %(message)s"))
        logger_adapter.logger.addHandler(file_handler)

    return logger_adapter
