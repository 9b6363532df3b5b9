#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Minimal client of the Proxmox VE API

# Read:
# - https://pve.proxmox.com/wiki/Proxmox_VE_API
# - https://pve.proxmox.com/pve-docs/api-viewer/
"""

import logging
import time
from collections.abc import Iterable, Mapping
from typing import Any

import requests

from pvecheck.proxmox.objects import Object
from pvecheck.utils.exceptions import MKFetcherError

LOGGER = logging.getLogger("pvecheck.api")

# Tickets issued by /access/ticket are valid for two hours
TICKET_LIFETIME = 2 * 60 * 60


class ProxmoxVeSession:
    """Ticket authenticated session to one Proxmox VE host"""

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        realm: str,
        timeout: int,
        verify_ssl: bool,
    ) -> None:
        self.host = host
        self._credentials = {"username": "%s@%s" % (username, realm), "password": password}
        self._timeout = timeout
        self._verify_ssl = verify_ssl
        self._base_url = "https://%s:%d/" % (host, port)
        self._ticket: str | None = None
        self._ticket_time = 0.0
        self._session = self._create_session()

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        session.headers["Connection"] = "keep-alive"
        session.headers["accept"] = ", ".join(
            (
                "application/json",
                "application/x-javascript",
                "text/javascript",
                "text/x-javascript",
                "text/x-json",
            )
        )
        return session

    def __enter__(self) -> "ProxmoxVeSession":
        return self

    def __exit__(self, *args: Any, **kwargs: Any) -> None:
        self.close()

    def close(self) -> None:
        """close connection to Proxmox VE endpoint"""
        if self._session:
            self._session.close()

    def login(self) -> bool:
        ticket_url = self._base_url + "api2/json/access/ticket"
        LOGGER.info("Authenticate %r @ %r", self._credentials["username"], ticket_url)
        response = self._session.post(
            url=ticket_url,
            data=self._credentials,
            verify=self._verify_ssl,
            timeout=self._timeout,
        )
        if not response.ok:
            LOGGER.info("Login to %s failed: HTTP %d", self.host, response.status_code)
            return False

        data = response.json().get("data")
        if not data or "ticket" not in data:
            LOGGER.info("Login to %s failed: no ticket in response", self.host)
            return False

        self._ticket = data["ticket"]
        self._ticket_time = time.time()
        self._session.cookies.set("PVEAuthCookie", self._ticket)
        self._session.headers["CSRFPreventionToken"] = data.get("CSRFPreventionToken", "")
        return True

    def check_login_ticket(self) -> bool:
        return self._ticket is not None and time.time() - self._ticket_time < TICKET_LIFETIME

    def get_raw(self, sub_url: str) -> requests.Response:
        return self._session.request(
            method="GET",
            url=self._base_url + sub_url,
            verify=self._verify_ssl,
            timeout=self._timeout,
        )

    def get_api_element(self, path: str) -> Any:
        """do an API GET request"""
        response = self.get_raw("api2/json/" + path.lstrip("/"))
        if not response.ok:
            raise MKFetcherError(
                "Could not fetch %r (HTTP %d %s)" % (path, response.status_code, response.reason)
            )
        response_json = response.json()
        if "errors" in response_json:
            raise MKFetcherError("Could not fetch %r (%r)" % (path, response_json["errors"]))
        return response_json.get("data")

    def api_version(self) -> Mapping[str, Any]:
        return self.get_api_element("version") or {}

    def get(self, path: str | Iterable[str]) -> list[Object]:
        """Handle request items in form of 'path/to/item' or ['path', 'to', 'item']"""
        data = self.get_api_element(path if isinstance(path, str) else "/".join(map(str, path)))
        if data is None:
            return []
        if not isinstance(data, list):
            raise MKFetcherError("Unexpected response for %r: not a list of objects" % path)
        return [dict(obj) for obj in data]
