#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Glob based object expressions

An expression is a whitespace separated list of clauses, all of which have
to match (logical AND):

    key=glob      the value of the field "key" matches the shell pattern
    key!=glob     the value of the field "key" does not match the shell pattern

Absent fields match as the empty string. The empty expression matches every
object.

>>> matches("type=qemu name!=test-*", {"type": "qemu", "name": "web01"})
True
"""

import re
from collections.abc import Iterable, Sequence
from fnmatch import fnmatchcase
from typing import NamedTuple

from pvecheck.proxmox.objects import field_text, Object
from pvecheck.utils.exceptions import MKUsageError

_CLAUSE = re.compile(r"^([^=!\s]+)(!?=)(.*)$")


class Clause(NamedTuple):
    key: str
    negate: bool
    pattern: str

    def matches(self, obj: Object) -> bool:
        return fnmatchcase(field_text(obj, self.key), self.pattern) != self.negate


def parse_expression(expression: str) -> Sequence[Clause]:
    clauses = []
    for raw_clause in expression.split():
        match = _CLAUSE.match(raw_clause)
        if match is None:
            raise MKUsageError(
                "Invalid expression %r: clause %r is not of the form key=glob or key!=glob"
                % (expression, raw_clause)
            )
        key, operator, pattern = match.groups()
        clauses.append(Clause(key, operator == "!=", pattern))
    return clauses


def matches(expression: str, obj: Object) -> bool:
    return all(clause.matches(obj) for clause in parse_expression(expression))


def filter_objects(expression: str, objects: Iterable[Object]) -> list[Object]:
    """Return the objects matching the expression, keeping their order"""
    clauses = parse_expression(expression)
    return [obj for obj in objects if all(clause.matches(obj) for clause in clauses)]
