#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import io
from collections.abc import Callable, Iterator, Sequence

import pytest

from tests.unit.pvecheck.mocks_and_helpers import FakeSession, SessionFactoryMaker

from pvecheck.proxmox.results import CheckResults
from pvecheck.utils import log


@pytest.fixture(name="results_stream")
def fixture_results_stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture(name="results")
def fixture_results(results_stream: io.StringIO) -> CheckResults:
    return CheckResults(stream=results_stream)


@pytest.fixture(name="session_factory")
def fixture_session_factory() -> SessionFactoryMaker:
    def make(sessions: Sequence[FakeSession]) -> Callable[[str], FakeSession]:
        by_host = {session.host: session for session in sessions}
        return lambda host: by_host[host]

    return make


@pytest.fixture(autouse=True)
def fixture_reset_logging() -> Iterator[None]:
    yield
    log.clear_console_logging()
