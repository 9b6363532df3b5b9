#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Options of the check, merged from the command line and a config file

The config file holds one "option value" pair per line, e.g.

    # Proxmox cluster in the basement
    host pve1.example.com
    host pve2.example.com
    password secret
    override id=storage/*^critdiskpercent^90
"""

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from pvecheck.proxmox.expression import parse_expression
from pvecheck.proxmox.rules import Override, parse_override, parse_string_rule, StringRule
from pvecheck.utils.exceptions import MKUsageError

MULTI_OPTIONS = frozenset({"host", "warnstr", "critstr", "override"})
FLAG_OPTIONS = frozenset({"insecure", "debug"})
SINGLE_OPTIONS = frozenset(
    {"password", "username", "port", "realm", "mode", "filter", "timeout", "verbose"}
)

_TRUE = {"1", "yes", "true", "on"}
_FALSE = {"0", "no", "false", "off"}


class CheckArgs(BaseModel, frozen=True):
    host: list[str]
    mode: str
    password: str = ""
    username: str = "root"
    port: int = 8006
    realm: str = "pam"
    warnstr: list[str] = []
    critstr: list[str] = []
    override: list[str] = []
    filter: str = ""
    insecure: bool = False
    timeout: int = 20
    debug: bool = False
    verbose: int = 0

    @property
    def overrides(self) -> Sequence[Override]:
        return [parse_override(raw) for raw in self.override]

    @property
    def warn_rules(self) -> Sequence[StringRule]:
        return [parse_string_rule(raw) for raw in self.warnstr]

    @property
    def crit_rules(self) -> Sequence[StringRule]:
        return [parse_string_rule(raw) for raw in self.critstr]


def _parse_flag(option: str, value: str) -> bool:
    if value.lower() in _TRUE:
        return True
    if value.lower() in _FALSE:
        return False
    raise MKUsageError("Invalid value %r for flag %r" % (value, option))


def parse_config_lines(lines: Sequence[str], source: str = "<config>") -> dict[str, Any]:
    config: dict[str, Any] = {}
    for lineno, raw_line in enumerate(lines, start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        option, *rest = line.split(None, 1)
        option, value = option.lstrip("-"), rest[0].strip() if rest else ""

        if option in MULTI_OPTIONS:
            config.setdefault(option, []).append(value)
        elif option in FLAG_OPTIONS:
            config[option] = _parse_flag(option, value) if value else True
        elif option in SINGLE_OPTIONS:
            config[option] = value
        else:
            raise MKUsageError("%s:%d: Unknown option %r" % (source, lineno, option))
    return config


def load_config_file(path: Path) -> dict[str, Any]:
    try:
        with path.open(encoding="utf-8") as config_file:
            return parse_config_lines(config_file.read().splitlines(), str(path))
    except OSError as e:
        raise MKUsageError("Cannot read config file %s: %s" % (path, e))


def merge_options(cli: Mapping[str, Any], config: Mapping[str, Any]) -> CheckArgs:
    """Command line values win over config file values, multi options are joined"""
    merged: dict[str, Any] = {}
    for option in MULTI_OPTIONS:
        values = list(config.get(option, [])) + list(cli.get(option) or [])
        if values:
            merged[option] = values
    for option in SINGLE_OPTIONS | FLAG_OPTIONS:
        if cli.get(option) is not None:
            merged[option] = cli[option]
        elif config.get(option) is not None:
            merged[option] = config[option]

    if not merged.get("host"):
        raise MKUsageError("No host given")
    if not merged.get("mode"):
        raise MKUsageError("No mode given")

    try:
        args = CheckArgs.model_validate(merged)
    except ValidationError as e:
        raise MKUsageError("Invalid options: %s" % e)

    # Broken rules and expressions abort the run before anything is checked
    parse_expression(args.filter)
    _ = args.overrides, args.warn_rules, args.crit_rules
    return args
