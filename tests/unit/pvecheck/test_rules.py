#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import pytest

from pvecheck.proxmox.objects import Object
from pvecheck.proxmox.rules import (
    apply_overrides,
    Override,
    parse_override,
    parse_string_rule,
    StringRule,
)
from pvecheck.utils.exceptions import MKUsageError


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("id=storage/x^critdisk^100", Override("id=storage/x", "critdisk", "100")),
        ("^warnmem^1.5", Override("", "warnmem", "1.5")),
        ("type=qemu^critcpu^.5", Override("type=qemu", "critcpu", ".5")),
        ("type=qemu^critcpu^", Override("type=qemu", "critcpu", "")),
    ],
)
def test_parse_override(raw: str, expected: Override) -> None:
    assert parse_override(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        "id=storage/x^critdisk",
        "id=storage/x^critdisk^100^1",
        "id=storage/x^critdisk^-1",
        "id=storage/x^critdisk^80%",
        "id=storage/x^critdisk^1e3",
        "id=storage/x^critdisk^.",
        "id=storage/x^^100",
        "broken^critdisk^100",
    ],
)
def test_parse_invalid_override(raw: str) -> None:
    with pytest.raises(MKUsageError):
        parse_override(raw)


def test_parse_string_rule() -> None:
    assert parse_string_rule("status!=running^stopped^VM is not running") == StringRule(
        "status!=running", "stopped", "VM is not running"
    )


def test_parse_string_rule_empty_label() -> None:
    assert parse_string_rule("lock=backup^^Backup running").field == ""


def test_parse_invalid_string_rule() -> None:
    with pytest.raises(MKUsageError):
        parse_string_rule("status!=running^stopped")


def test_later_override_wins() -> None:
    objects: list[Object] = [{"id": "storage/x", "critdisk": ""}, {"id": "storage/y"}]
    apply_overrides(
        [
            Override("id=storage/x", "critdisk", "100"),
            Override("id=storage/x", "critdisk", "200"),
        ],
        objects,
    )
    assert objects[0]["critdisk"] == "200"
    assert "critdisk" not in objects[1]


def test_override_replaces_api_value() -> None:
    objects: list[Object] = [{"id": "qemu/100", "maxdisk": 34359738368}]
    apply_overrides([Override("id=qemu/*", "maxdisk", "1000")], objects)
    assert objects == [{"id": "qemu/100", "maxdisk": "1000"}]


def test_override_without_match() -> None:
    objects: list[Object] = [{"id": "qemu/100"}]
    apply_overrides([Override("id=lxc/*", "critmem", "1")], objects)
    assert objects == [{"id": "qemu/100"}]


def test_override_sees_previous_override() -> None:
    objects: list[Object] = [{"id": "qemu/100"}]
    apply_overrides(
        [Override("id=qemu/*", "pool", "1"), Override("pool=1", "critmem", "5")], objects
    )
    assert objects == [{"id": "qemu/100", "pool": "1", "critmem": "5"}]
