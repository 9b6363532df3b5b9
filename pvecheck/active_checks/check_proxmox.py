#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""check_proxmox - Monitor the nodes, guests and storages of a Proxmox VE cluster

Examples:

  check_proxmox -H pve1 -H pve2 -p secret -m storage \\
      --override 'id=storage/*^critdiskpercent^90'

  check_proxmox -H pve1 -p secret -m qemu -f 'node=pve1' \\
      --critstr 'status!=running^stopped^VM is not running'

Rules (--override, --warnstr, --critstr) are caret separated triples whose
first part is an expression: space separated clauses key=glob or key!=glob
which all have to match.
"""

import argparse
import functools
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import NoReturn

import requests
import urllib3

from pvecheck.proxmox.api import ProxmoxVeSession
from pvecheck.proxmox.config import CheckArgs, load_config_file, merge_options
from pvecheck.proxmox.expression import filter_objects
from pvecheck.proxmox.failover import connect_first, SessionFactory
from pvecheck.proxmox.metrics import augment_objects, check_objects
from pvecheck.proxmox.modes import get_mode, MODES, STATUS_MODE
from pvecheck.proxmox.results import CheckResults
from pvecheck.proxmox.rules import apply_overrides
from pvecheck.proxmox.status import check_cluster_status
from pvecheck.utils.exceptions import EXIT_USAGE, MKBailOut, MKFetcherError, MKUsageError
from pvecheck.utils.log import setup_console_logging
from pvecheck.utils.password_store import replace_passwords
from pvecheck.utils.statename import State

LOGGER = logging.getLogger("pvecheck")


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise MKUsageError("%s%s: error: %s" % (self.format_usage(), self.prog, message))


def _modes_help() -> str:
    return "modes:\n" + "\n".join(
        "  %-10s %s" % (name, mode.help) for name, mode in sorted(MODES.items())
    )


def parse_arguments(argv: Sequence[str]) -> argparse.Namespace:
    parser = _ArgumentParser(
        prog="check_proxmox",
        description=__doc__,
        epilog=_modes_help(),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-H",
        "--host",
        action="append",
        metavar="HOST",
        help="Proxmox VE host to connect to. Give it more than once to fail over to the next host.",
    )
    parser.add_argument("-u", "--username", help="Username for the API login (Default: root)")
    parser.add_argument("-p", "--password", help="Password for the API login")
    parser.add_argument("-r", "--realm", help="Authentication realm (Default: pam)")
    parser.add_argument("-P", "--port", type=int, help="API port (Default: 8006)")
    parser.add_argument("-m", "--mode", help="What to check, see the list of modes below")
    parser.add_argument(
        "-f",
        "--filter",
        metavar="EXPRESSION",
        help="Only check the objects matching this expression",
    )
    parser.add_argument(
        "--override",
        action="append",
        metavar="EXPRESSION^FIELD^VALUE",
        help="Set FIELD to the numeric VALUE on all matching objects, e.g. a threshold like critdisk",
    )
    parser.add_argument(
        "--warnstr",
        action="append",
        metavar="EXPRESSION^LABEL^MESSAGE",
        help="Report every matching object as WARNING",
    )
    parser.add_argument(
        "--critstr",
        action="append",
        metavar="EXPRESSION^LABEL^MESSAGE",
        help="Report every matching object as CRITICAL",
    )
    parser.add_argument(
        "-k",
        "--insecure",
        action="store_true",
        default=None,
        help="Do not verify the TLS certificate of the API",
    )
    parser.add_argument("-t", "--timeout", type=int, help="API call timeout (Default: 20)")
    parser.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        help="Read options from FILE, one 'option value' pair per line",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=None,
        help="Verbose mode (for even more output use -vv)",
    )
    parser.add_argument(
        "--debug", action="store_true", default=None, help="Raise python exceptions."
    )

    return parser.parse_args(argv)


def build_args(argv: Sequence[str]) -> CheckArgs:
    namespace = parse_arguments(argv)
    config = load_config_file(Path(namespace.config)) if namespace.config else {}
    return merge_options(vars(namespace), config)


def check_proxmox(args: CheckArgs, results: CheckResults, session_factory: SessionFactory) -> None:
    mode = get_mode(args.mode)
    if mode is None:
        results.finish(State.UNKNOWN, "Unknown mode %s" % args.mode)

    overrides, warn_rules, crit_rules = args.overrides, args.warn_rules, args.crit_rules

    session = connect_first(args.host, session_factory, results)
    try:
        objects = session.get("cluster/status" if mode.name == STATUS_MODE else "cluster/resources")
    finally:
        session.close()
    LOGGER.info("Fetched %d object(s)", len(objects))

    objects = filter_objects(mode.type_expression, objects)
    objects = filter_objects(args.filter, objects)
    LOGGER.info("%d %s object(s) selected", len(objects), mode.name)
    if not objects:
        results.finish(State.UNKNOWN, "No %s objects found" % mode.name)

    apply_overrides(overrides, objects)

    if mode.name == STATUS_MODE:
        check_cluster_status(results, objects, mode, warn_rules, crit_rules)
    else:
        augment_objects(objects, mode)
        check_objects(results, objects, mode, warn_rules, crit_rules)

    if not results.short:
        results.emit(State.OK, "%d %s checked" % (len(objects), mode.name))


def _session_factory(args: CheckArgs) -> SessionFactory:
    return functools.partial(
        ProxmoxVeSession,
        port=args.port,
        username=args.username,
        password=args.password,
        realm=args.realm,
        timeout=args.timeout,
        verify_ssl=not args.insecure,
    )


def main(argv: Sequence[str] | None = None) -> int:
    results = CheckResults()

    try:
        argv = replace_passwords(sys.argv if argv is None else ["check_proxmox", *argv])
        args = build_args(argv[1:])
    except MKUsageError as e:
        sys.stderr.write("%s\n" % e)
        return EXIT_USAGE
    except MKBailOut as e:
        results.finish(State.UNKNOWN, str(e))

    setup_console_logging(args.verbose)
    if args.insecure:
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    try:
        check_proxmox(args, results, _session_factory(args))
    except MKUsageError as e:
        if args.debug:
            raise
        sys.stderr.write("%s\n" % e)
        return EXIT_USAGE
    except (requests.RequestException, MKFetcherError) as e:
        if args.debug:
            raise
        results.finish(State.UNKNOWN, "API error", "UNKNOWN: %s" % e)

    results.finish()


if __name__ == "__main__":
    sys.exit(main())
