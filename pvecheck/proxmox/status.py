#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Evaluation of /cluster/status

The answer holds one entry of type "cluster" (missing on stand-alone nodes)
and one entry of type "node" per cluster member:

    {"type": "cluster", "id": "cluster", "name": "pve", "nodes": 3, "quorate": 1, "version": 7}
    {"type": "node", "id": "node/n1", "name": "n1", "online": 1, "local": 1, "ip": "10.0.0.1"}
"""

from collections.abc import Sequence

from pvecheck.proxmox.metrics import check_string_rules
from pvecheck.proxmox.modes import Mode
from pvecheck.proxmox.objects import field_text, is_set, Object
from pvecheck.proxmox.results import CheckResults
from pvecheck.proxmox.rules import StringRule
from pvecheck.utils.statename import State


def _check_cluster(results: CheckResults, name: str, obj: Object) -> None:
    if not is_set(obj.get("quorate")):
        results.emit(State.CRIT, "%s not quorate" % name, "CRITICAL: %s: cluster is not quorate" % name)
    results.emit(perfdata="%s.nodes=%s;;;0;" % (name, field_text(obj, "nodes") or "0"))


def _check_node(results: CheckResults, name: str, obj: Object) -> None:
    if not is_set(obj.get("online")):
        results.emit(State.WARN, "%s offline" % name, "WARNING: %s: node is offline" % name)


def check_cluster_status(
    results: CheckResults,
    objects: Sequence[Object],
    mode: Mode,
    warnstr: Sequence[StringRule] = (),
    critstr: Sequence[StringRule] = (),
) -> None:
    check_string_rules(results, objects, mode, warnstr, critstr)
    for obj in objects:
        name = mode.object_name(obj)
        match field_text(obj, "type"):
            case "cluster":
                _check_cluster(results, name, obj)
            case "node":
                _check_node(results, name, obj)
