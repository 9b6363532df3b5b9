#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import abc
from collections.abc import Mapping
from dataclasses import dataclass

from pvecheck.proxmox.objects import field_text, Object

STATUS_MODE = "status"

_GUEST_FIELDS: Mapping[str, str] = {
    "cpu": "",
    "disk": "B",
    "diskread": "B",
    "diskwrite": "B",
    "mem": "B",
    "netin": "B",
    "netout": "B",
    "uptime": "s",
}


@dataclass(frozen=True)
class Mode(abc.ABC):
    name: str
    help: str
    perf_fields: Mapping[str, str]

    @abc.abstractmethod
    def object_name(self, obj: Object) -> str:
        raise NotImplementedError()

    @property
    def type_expression(self) -> str:
        return "type=%s" % self.name

    def sorted_fields(self) -> list[tuple[str, str]]:
        return sorted(self.perf_fields.items())


@dataclass(frozen=True)
class FieldNamedMode(Mode):
    """Objects are named after a single field"""

    name_field: str = "name"

    def object_name(self, obj: Object) -> str:
        return field_text(obj, self.name_field)


@dataclass(frozen=True)
class NodeQualifiedMode(Mode):
    """Objects are named <node>.<field>, they only exist in the scope of a node"""

    name_field: str = "name"

    def object_name(self, obj: Object) -> str:
        return "%s.%s" % (field_text(obj, "node"), field_text(obj, self.name_field))


@dataclass(frozen=True)
class StatusMode(FieldNamedMode):
    """Entries of /cluster/status, no performance data"""

    @property
    def type_expression(self) -> str:
        return ""


MODES: Mapping[str, Mode] = {
    mode.name: mode
    for mode in (
        FieldNamedMode(
            name="node",
            help="Check the nodes of the cluster",
            perf_fields={"cpu": "", "disk": "B", "mem": "B", "uptime": "s"},
            name_field="node",
        ),
        NodeQualifiedMode(
            name="qemu",
            help="Check the QEMU virtual machines",
            perf_fields=_GUEST_FIELDS,
        ),
        FieldNamedMode(
            name="lxc",
            help="Check the LXC containers",
            perf_fields=_GUEST_FIELDS,
        ),
        NodeQualifiedMode(
            name="storage",
            help="Check the storage volumes of every node",
            perf_fields={"disk": "B"},
            name_field="storage",
        ),
        StatusMode(
            name=STATUS_MODE,
            help="Check the quorum of the cluster and the membership of its nodes",
            perf_fields={},
        ),
    )
}


def get_mode(name: str) -> Mode | None:
    return MODES.get(name)
