#
# Copyright (c) Granulate. All rights reserved.
# Licensed under the AGPL3 License. See LICENSE.md in the project root for license information.
#
import re
from pathlib import Path
from typing import Iterator

import setuptools


def read_requirements(path: str) -> Iterator[str]:
    with open(path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            yield line


version = re.search(r'__version__\s*=\s*"(.*?)"', Path("cgroupmem/__init__.py").read_text())
assert version is not None, "could not parse version!"

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setuptools.setup(
    name="cgroupmem",
    version=version.group(1),
    author="Granulate",
    description="Memory cgroups and limits of Linux processes, from /proc/[pid]/cgroup",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: POSIX :: Linux",
    ],
    packages=setuptools.find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=list(read_requirements("requirements.txt")),
    extras_require={"test": list(read_requirements("dev-requirements.txt"))},
    entry_points={"console_scripts": ["cgroupmem=cgroupmem.main:main"]},
    python_requires=">=3.8",
)
