#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Threshold evaluation of the performance fields of an object

For every performance field <f> of a mode an object carries the observed
value and, after augment_objects(), the sub fields

    warn<f>  crit<f>  min<f>  max<f>  warn<f>percent  crit<f>percent

and <f>percent if a positive max<f> is known. Thresholds are usually set by
overrides: a threshold t is breached if t <= observed value.
"""

import logging
from collections.abc import Iterable, Sequence

from pvecheck.proxmox.expression import filter_objects
from pvecheck.proxmox.modes import Mode
from pvecheck.proxmox.objects import (
    field_number,
    field_text,
    FieldValue,
    is_set,
    Object,
    render_number,
)
from pvecheck.proxmox.results import CheckResults
from pvecheck.proxmox.rules import StringRule
from pvecheck.utils.statename import service_state_name, State

LOGGER = logging.getLogger("pvecheck.metrics")

_DEFAULTS: Sequence[tuple[str, FieldValue]] = (
    ("warn%s", ""),
    ("crit%s", ""),
    ("min%s", "0"),
    ("max%s", ""),
    ("warn%spercent", ""),
    ("crit%spercent", ""),
)


def augment_object(obj: Object, mode: Mode) -> None:
    for field, _unit in mode.sorted_fields():
        for template, default in _DEFAULTS:
            key = template % field
            if not is_set(obj.get(key)):
                obj[key] = default

        max_key = "max%s" % field
        if (
            is_set(obj[max_key])
            and field_number(obj, max_key) > 0
            and is_set(obj.get(field))
        ):
            obj["%spercent" % field] = field_number(obj, field) * 100 / field_number(obj, max_key)


def augment_objects(objects: Iterable[Object], mode: Mode) -> None:
    for obj in objects:
        augment_object(obj, mode)


def _check_levels(
    results: CheckResults,
    name: str,
    obj: Object,
    field: str,
    unit: str,
) -> None:
    value = field_number(obj, field)
    for state, prefix in ((State.WARN, "warn"), (State.CRIT, "crit")):
        threshold_key = prefix + field
        if not is_set(obj.get(threshold_key)):
            continue
        threshold = field_number(obj, threshold_key)
        if threshold <= value:
            threshold_text = field_text(obj, threshold_key)
            results.emit(
                state,
                "%s %s>%s%s" % (name, field, threshold_text, unit),
                "%s: %s: %s is %s%s (threshold %s%s)"
                % (
                    service_state_name(state),
                    name,
                    field,
                    render_number(value),
                    unit,
                    threshold_text,
                    unit,
                ),
            )


def _perfdata(name: str, obj: Object, field: str, unit: str, minimum: str, maximum: str) -> str:
    return "%s.%s=%s%s;%s;%s;%s;%s" % (
        name,
        field,
        render_number(obj.get(field, 0)),
        unit,
        field_text(obj, "warn" + field),
        field_text(obj, "crit" + field),
        minimum,
        maximum,
    )


def check_object(results: CheckResults, obj: Object, mode: Mode) -> None:
    name = mode.object_name(obj)
    for field, unit in mode.sorted_fields():
        _check_levels(results, name, obj, field, unit)
        results.emit(
            perfdata=_perfdata(
                name,
                obj,
                field,
                unit,
                field_text(obj, "min" + field),
                field_text(obj, "max" + field),
            )
        )

        percent_field = "%spercent" % field
        if percent_field not in obj:
            continue
        _check_levels(results, name, obj, percent_field, "%")
        results.emit(perfdata=_perfdata(name, obj, percent_field, "%", "0", "100"))


def check_string_rules(
    results: CheckResults,
    objects: Sequence[Object],
    mode: Mode,
    warnstr: Sequence[StringRule],
    critstr: Sequence[StringRule],
) -> None:
    for state, rules in ((State.WARN, warnstr), (State.CRIT, critstr)):
        for rule in rules:
            for obj in filter_objects(rule.pattern, objects):
                name = mode.object_name(obj)
                LOGGER.debug("%s rule %r matches %s", service_state_name(state), rule.pattern, name)
                results.emit(
                    state,
                    "%s %s" % (name, rule.field) if rule.field else name,
                    "%s: %s: %s" % (service_state_name(state), name, rule.value),
                )


def check_objects(
    results: CheckResults,
    objects: Sequence[Object],
    mode: Mode,
    warnstr: Sequence[StringRule] = (),
    critstr: Sequence[StringRule] = (),
) -> None:
    check_string_rules(results, objects, mode, warnstr, critstr)
    for obj in objects:
        check_object(results, obj, mode)
