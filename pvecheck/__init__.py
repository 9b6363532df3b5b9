#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Proxmox VE active check: object filtering, overrides and threshold evaluation.

This library is currently handled as internal module of the check and
does not offer stable APIs. The code may change at any time."""
