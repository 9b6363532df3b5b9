#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Rules given on the command line as caret separated triples

    --override 'id=storage/*^critdiskpercent^90'
    --warnstr  'type=qemu status!=running^stopped^VM is not running'
"""

import logging
import re
from collections.abc import Iterable, Sequence
from typing import NamedTuple

from pvecheck.proxmox.expression import filter_objects, parse_expression
from pvecheck.proxmox.objects import Object
from pvecheck.utils.exceptions import MKUsageError

LOGGER = logging.getLogger("pvecheck.rules")

_NUMERIC_VALUE = re.compile(r"^[0-9]*(\.[0-9]*)?$")


class RuleTriple(NamedTuple):
    pattern: str
    field: str
    value: str


class Override(RuleTriple):
    """pattern^field^numeric-value: force a field value on matching objects"""


class StringRule(RuleTriple):
    """pattern^short-label^long-message: report every matching object"""


def _split_triple(raw: str) -> tuple[str, str, str]:
    parts = raw.split("^")
    if len(parts) != 3:
        raise MKUsageError("Invalid rule %r: expected pattern^a^b" % raw)
    # Fail early on a broken pattern, not only when the rule is applied
    parse_expression(parts[0])
    return parts[0], parts[1], parts[2]


def parse_override(raw: str) -> Override:
    """
    >>> parse_override("id=storage/x^critdisk^100")
    Override(pattern='id=storage/x', field='critdisk', value='100')
    """
    pattern, field, value = _split_triple(raw)
    if not field:
        raise MKUsageError("Invalid override %r: empty field name" % raw)
    if not _NUMERIC_VALUE.match(value):
        raise MKUsageError("Invalid override %r: %r is not a number" % (raw, value))
    if value:
        try:
            float(value)
        except ValueError:
            raise MKUsageError("Invalid override %r: %r is not a number" % (raw, value))
    return Override(pattern, field, value)


def parse_string_rule(raw: str) -> StringRule:
    return StringRule(*_split_triple(raw))


def apply_overrides(overrides: Sequence[Override], objects: Iterable[Object]) -> None:
    """Set the overridden fields in place. Later overrides win."""
    objects = list(objects)
    for override in overrides:
        matching = filter_objects(override.pattern, objects)
        LOGGER.debug(
            "Override %s=%s applies to %d object(s)", override.field, override.value, len(matching)
        )
        for obj in matching:
            obj[override.field] = override.value
