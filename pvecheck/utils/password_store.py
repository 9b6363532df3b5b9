#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""This module is meant to be used by the check to get credentials from a
password store file instead of the command line.

The check calls replace_passwords() on its arguments before parsing them,
which makes the pwstore option handling transparent:

  --pwstore=4@4@web,6@0@foo
   In the 4th argument at char 4 replace the following bytes
   with the passwords stored under the ID 'web'
   In the 6th argument at char 0 insert the password with the ID 'foo'

The store is a file of "<id>:<password>" lines.
"""

import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import NoReturn

from pvecheck.utils.exceptions import MKBailOut

DEFAULT_PASSWORD_STORE = Path("/etc/pvecheck/stored_passwords")


def password_store_path() -> Path:
    return Path(os.environ.get("PVECHECK_PASSWORD_STORE", DEFAULT_PASSWORD_STORE))


def bail_out(s: str) -> NoReturn:
    raise MKBailOut("pwstore: %s" % s)


def replace_passwords(argv: Sequence[str]) -> list[str]:
    """Resolve a leading --pwstore argument, argv[0] being the program name"""
    args = list(argv)
    if len(args) < 2 or not args[1].startswith("--pwstore"):
        return args

    pwstore_args = args.pop(1).split("=", 1)[1]
    passwords = load()

    for password_spec in pwstore_args.split(","):
        parts = password_spec.split("@")
        if len(parts) != 3:
            bail_out("Invalid --pwstore entry: %s" % password_spec)

        try:
            num_arg, pos_in_arg, password_id = int(parts[0]), int(parts[1]), parts[2]
        except ValueError:
            bail_out("Invalid format: %s" % password_spec)

        try:
            arg = args[num_arg]
        except IndexError:
            bail_out("Argument %d does not exist" % num_arg)

        try:
            password = passwords[password_id]
        except KeyError:
            bail_out("Password '%s' does not exist" % password_id)

        args[num_arg] = arg[:pos_in_arg] + password + arg[pos_in_arg + len(password) :]

    return args


def load(path: Path | None = None) -> Mapping[str, str]:
    passwords = {}
    try:
        with (path or password_store_path()).open(encoding="utf-8") as store:
            for line in store:
                if not line.strip():
                    continue
                ident, password = line.rstrip("\n").split(":", 1)
                passwords[ident] = password
    except OSError as e:
        bail_out("Cannot read password store: %s" % e)
    return passwords
