#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Aggregation of the findings of one check run

Every stage of the check reports into one CheckResults instance. The worst
state wins, texts and perfdata keep their order. finish() writes the result
in the format of the monitoring plug-in API and ends the process:

    Proxmox CRITICAL: n1.vm1 disk>80B |n1.vm1.disk=90B;;80;0;100
    CRITICAL: n1.vm1: disk is 90B (threshold 80B)
"""

import sys
from typing import NoReturn, TextIO

from pvecheck.utils.exceptions import MKGeneralException
from pvecheck.utils.statename import service_state_name, State


class CheckResults:
    def __init__(self, stream: TextIO | None = None) -> None:
        self.state = State.OK
        self.short: list[str] = []
        self.long: list[str] = []
        self.perfdata: list[str] = []
        self._stream = stream
        self._finished = False

    def emit(
        self,
        state: State | None = None,
        short: str | None = None,
        long: str | None = None,
        perfdata: str | None = None,
    ) -> None:
        if state is not None:
            self.state = State.worst(self.state, state)
        if short:
            self.short.append(short)
        if long:
            self.long.append(long)
        if perfdata:
            self.perfdata.append(perfdata)

    def render(self) -> str:
        output = "Proxmox %s: %s |%s\n" % (
            service_state_name(self.state),
            ". ".join(self.short),
            " ".join(self.perfdata),
        )
        return output + "".join("%s\n" % line for line in self.long)

    def finish(
        self,
        state: State | None = None,
        short: str | None = None,
        long: str | None = None,
    ) -> NoReturn:
        if self._finished:
            raise MKGeneralException("Check result has already been written")
        self._finished = True

        self.emit(state, short, long)
        stream = sys.stdout if self._stream is None else self._stream
        stream.write(self.render())
        stream.flush()
        sys.exit(int(self.state))
