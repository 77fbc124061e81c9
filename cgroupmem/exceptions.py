#
# Copyright (c) Granulate. All rights reserved.
# Licensed under the AGPL3 License. See LICENSE.md in the project root for license information.
#


class CgroupParseError(Exception):
    def __init__(self, message: str, line: str):
        super().__init__(message)
        self.line = line


class MalformedCgroupLineError(CgroupParseError):
    def __init__(self, line: str, fields_count: int):
        super().__init__(
            f"at least 3 fields required, found {fields_count} fields in cgroup string: {line!r}",
            line,
        )
        self.fields_count = fields_count


class InvalidHierarchyIdError(CgroupParseError):
    def __init__(self, line: str, hierarchy_id: str):
        super().__init__(f"failed to parse hierarchy ID {hierarchy_id!r} in cgroup string: {line!r}", line)
        self.hierarchy_id = hierarchy_id
