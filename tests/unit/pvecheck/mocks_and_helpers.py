#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from pvecheck.proxmox.objects import Object

SessionFactoryMaker = Callable[[Sequence["FakeSession"]], Callable[[str], "FakeSession"]]


class FakeSession:
    """Stands in for ProxmoxVeSession, answers GET requests from a dict"""

    def __init__(
        self,
        host: str,
        objects: Mapping[str, Sequence[Object]] | None = None,
        login_ok: bool = True,
        ticket_ok: bool = True,
        version: str = "8.1.4",
        login_exception: Exception | None = None,
        version_exception: Exception | None = None,
    ) -> None:
        self.host = host
        self._objects = objects or {}
        self._login_ok = login_ok
        self._ticket_ok = ticket_ok
        self._version = version
        self._login_exception = login_exception
        self._version_exception = version_exception
        self.calls: list[str] = []
        self.closed = False

    def login(self) -> bool:
        self.calls.append("login")
        if self._login_exception is not None:
            raise self._login_exception
        return self._login_ok

    def check_login_ticket(self) -> bool:
        self.calls.append("check_login_ticket")
        return self._ticket_ok

    def api_version(self) -> Mapping[str, Any]:
        self.calls.append("api_version")
        if self._version_exception is not None:
            raise self._version_exception
        return {"version": self._version, "release": self._version.rsplit(".", 1)[0]}

    def get(self, path: str) -> list[Object]:
        self.calls.append("get %s" % path)
        return [dict(obj) for obj in self._objects.get(path, [])]

    def close(self) -> None:
        self.closed = True
