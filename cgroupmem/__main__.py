#
# Copyright (c) Granulate. All rights reserved.
# Licensed under the AGPL3 License. See LICENSE.md in the project root for license information.
#
from cgroupmem.main import main

if __name__ == "__main__":
    main()
