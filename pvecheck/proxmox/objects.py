#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Field access on the objects returned by the Proxmox VE API

An object is a plain mapping of field names to text or numbers, e.g. one
entry of /cluster/resources:

    {"id": "qemu/100", "type": "qemu", "node": "n1", "name": "vm1", "disk": 0, ...}

Fields are read by name. Absent fields read as "" where text is needed and
as 0 where a number is needed.
"""

from pvecheck.utils.exceptions import MKUsageError

FieldValue = str | int | float
Object = dict[str, FieldValue]

_FALSY = (None, "", "0")


def is_set(value: FieldValue | None) -> bool:
    """Truthiness of a field value: absent, "", "0" and numeric zero are not set

    >>> [is_set(v) for v in (None, "", "0", 0, 0.0, "0.0", "10", 3)]
    [False, False, False, False, False, True, True, True]
    """
    if isinstance(value, (int, float)):
        return value != 0
    return value not in _FALSY


def render_number(value: FieldValue | None) -> str:
    """Render a field value the way it appears in the check output

    >>> [render_number(v) for v in (None, "", "80", 25.0, 1 / 3, 90)]
    ['', '', '80', '25', '0.333333', '90']
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return str(round(value, 6))
    return str(value)


def field_text(obj: Object, key: str) -> str:
    return render_number(obj.get(key))


def to_number(value: FieldValue | None, what: str = "value") -> float:
    if value is None or value == "":
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        raise MKUsageError("Invalid numeric %s: %r" % (what, value))


def field_number(obj: Object, key: str) -> float:
    return to_number(obj.get(key), what="field %s" % key)
