#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import pytest

from pvecheck.proxmox.expression import Clause, filter_objects, matches, parse_expression
from pvecheck.proxmox.objects import Object
from pvecheck.utils.exceptions import MKUsageError


@pytest.mark.parametrize(
    "expression, obj, expected",
    [
        ("key=node/*", {"key": "node/5"}, True),
        ("key!=node/*", {"key": "node/5"}, False),
        ("", {"key": "node/5"}, True),
        ("", {}, True),
        ("a=1 b=2", {"a": 1, "b": 2}, True),
        ("a=1 b=2", {"a": 1, "b": 3}, False),
        ("x=", {}, True),
        ("x!=", {}, False),
        ("x=*", {}, True),
        ("name=vm1", {"name": "vm1"}, True),
        ("name=vm1", {"name": "vm10"}, False),
        ("name=vm?", {"name": "vm1"}, True),
        ("name=vm[0-4]", {"name": "vm7"}, False),
        ("name=VM1", {"name": "vm1"}, False),
        ("vmid=100", {"vmid": 100}, True),
        ("maxdisk=25", {"maxdisk": 25.0}, True),
        ("type=qemu   status!=running", {"type": "qemu", "status": "stopped"}, True),
        ("type=qemu status!=running", {"type": "qemu", "status": "running"}, False),
        ("id=storage/n1/local", {"id": "storage/n1/local"}, True),
    ],
)
def test_matches(expression: str, obj: Object, expected: bool) -> None:
    assert matches(expression, obj) is expected


def test_parse_expression() -> None:
    assert parse_expression("type=qemu name!=test-*") == [
        Clause("type", False, "qemu"),
        Clause("name", True, "test-*"),
    ]


def test_parse_expression_value_with_equal_sign() -> None:
    assert parse_expression("a=b=c") == [Clause("a", False, "b=c")]


@pytest.mark.parametrize("expression", ["type", "=qemu", "!=qemu", "type==qemu x", "a!b"])
def test_invalid_expression(expression: str) -> None:
    with pytest.raises(MKUsageError):
        matches(expression, {})


def test_invalid_expression_without_objects() -> None:
    with pytest.raises(MKUsageError):
        filter_objects("nonsense", [])


def test_filter_objects_keeps_order() -> None:
    objects: list[Object] = [
        {"id": "qemu/101", "type": "qemu"},
        {"id": "node/n1", "type": "node"},
        {"id": "qemu/100", "type": "qemu"},
        {"id": "lxc/200", "type": "lxc"},
    ]
    assert [obj["id"] for obj in filter_objects("type=qemu", objects)] == [
        "qemu/101",
        "qemu/100",
    ]


def test_filter_objects_returns_same_objects() -> None:
    objects: list[Object] = [{"type": "qemu"}]
    assert filter_objects("", objects)[0] is objects[0]
