#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from setuptools import find_packages, setup

setup(
    name="check-proxmox",
    version="1.0.0",
    description="Active check for Proxmox VE clusters: nodes, guests, storages and quorum",
    packages=find_packages(include=["pvecheck", "pvecheck.*"]),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=["requests>=2.27", "urllib3", "pydantic>=2"],
    extras_require={"test": ["pytest"]},
    entry_points={
        "console_scripts": ["check_proxmox=pvecheck.active_checks.check_proxmox:main"],
    },
)
