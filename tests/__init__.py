#
# Copyright (c) Granulate. All rights reserved.
# Licensed under the AGPL3 License. See LICENSE.md in the project root for license information.
#

# what the kernel reports for a memory cgroup without a limit (PAGE_COUNTER_MAX rounded to pages)
UNLIMITED_MEMORY = 9223372036854771712
