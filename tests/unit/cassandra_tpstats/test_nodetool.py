#!/usr/bin/env python3
# Copyright (C) 2024 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import subprocess
from collections.abc import Callable, Sequence
from typing import Any

import pytest

from cassandra_tpstats import nodetool
from cassandra_tpstats.nodetool import NodetoolTPStats
from cassandra_tpstats.utils.exceptions import MKNodetoolError


def _fake_run(
    returncode: int = 0, stdout: str = "", stderr: str = ""
) -> tuple[list[Sequence[str]], Callable[..., subprocess.CompletedProcess[str]]]:
    calls: list[Sequence[str]] = []

    def run(cmd: Sequence[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        calls.append(cmd)
        assert "LANG" not in kwargs["env"]
        return subprocess.CompletedProcess(cmd, returncode, stdout, stderr)

    return calls, run


def test_nodetool_command(monkeypatch: pytest.MonkeyPatch) -> None:
    calls, run = _fake_run(stdout="Pool Name\n")
    monkeypatch.setattr(nodetool.subprocess, "run", run)

    assert NodetoolTPStats("/opt/cassandra/bin/nodetool")("db1", "7199", timeout=5) == "Pool Name\n"
    assert calls == [["/opt/cassandra/bin/nodetool", "-h", "db1", "-p", "7199", "tpstats"]]


def test_nodetool_from_search_path(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(nodetool.shutil, "which", lambda name: f"/usr/local/bin/{name}")
    calls, run = _fake_run()
    monkeypatch.setattr(nodetool.subprocess, "run", run)

    NodetoolTPStats()("localhost", "7199", timeout=5)
    assert calls[0][0] == "/usr/local/bin/nodetool"


def test_nodetool_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    _calls, run = _fake_run(
        returncode=1,
        stderr="nodetool: Failed to connect to 'localhost:7199' - ConnectException\n",
    )
    monkeypatch.setattr(nodetool.subprocess, "run", run)

    with pytest.raises(MKNodetoolError, match="Failed to connect"):
        NodetoolTPStats("nodetool")("localhost", "7199", timeout=5)


def test_nodetool_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    def run(cmd: Sequence[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(nodetool.subprocess, "run", run)

    with pytest.raises(MKNodetoolError, match="nodetool not found: /no/such/nodetool"):
        NodetoolTPStats("/no/such/nodetool")("localhost", "7199", timeout=5)


def test_nodetool_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    def run(cmd: Sequence[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

    monkeypatch.setattr(nodetool.subprocess, "run", run)

    with pytest.raises(MKNodetoolError, match="timed out after 2.5 seconds"):
        NodetoolTPStats("nodetool")("localhost", "7199", timeout=2.5)
