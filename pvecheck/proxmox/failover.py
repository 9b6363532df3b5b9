#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any, Protocol

import requests

from pvecheck.proxmox.objects import Object
from pvecheck.proxmox.results import CheckResults
from pvecheck.utils.exceptions import MKFetcherError
from pvecheck.utils.statename import State

LOGGER = logging.getLogger("pvecheck.failover")


class ClusterSession(Protocol):
    host: str

    def login(self) -> bool:
        ...

    def check_login_ticket(self) -> bool:
        ...

    def api_version(self) -> Mapping[str, Any]:
        ...

    def get(self, path: str) -> list[Object]:
        ...

    def close(self) -> None:
        ...


SessionFactory = Callable[[str], ClusterSession]


def _authenticate(session: ClusterSession) -> tuple[str | None, str]:
    """Log in and fetch the API version

    Returns the reason why the host is unusable (None on success) and the
    Proxmox VE version it reports.
    """
    try:
        if not session.login():
            return "Login failed", ""
        if not session.check_login_ticket():
            return "Invalid login ticket", ""
        return None, str(session.api_version().get("version", "unknown"))
    except (requests.RequestException, MKFetcherError) as e:
        return "Connection failed: %s" % e, ""


def connect_first(
    hosts: Sequence[str],
    session_factory: SessionFactory,
    results: CheckResults,
) -> ClusterSession:
    """Try the hosts in the given order and return the first authenticated session

    Every failed host is reported as WARNING. The run is finished as UNKNOWN if
    no host is left.
    """
    remaining = list(hosts)
    while remaining:
        host = remaining.pop(0)
        LOGGER.info("Trying host %s", host)
        session = session_factory(host)

        reason, version = _authenticate(session)
        if reason is not None:
            LOGGER.warning("Host %s is down: %s", host, reason)
            results.emit(State.WARN, "DOWN:%s" % host, "WARNING: %s: %s" % (host, reason))
            session.close()
            continue

        LOGGER.info("Connected to %s, Proxmox VE %s", host, version)
        results.emit(long="Connected to %s (Proxmox VE %s)" % (host, version))
        return session

    results.finish(State.UNKNOWN, "Failed connection", "Failed to find a suitable server to connect to")
