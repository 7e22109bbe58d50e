#!/usr/bin/env python3
# Copyright (C) 2024 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Run Cassandra's nodetool to get the thread pool statistics of a node"""

from __future__ import annotations

import os
import shutil
import subprocess
from typing import Protocol

from cassandra_tpstats.utils.exceptions import MKNodetoolError
from cassandra_tpstats.utils.log import logger


class ReportSourceProto(Protocol):
    def __call__(self, host: str, port: str, *, timeout: float) -> str: ...


class NodetoolTPStats:
    def __init__(self, nodetool: str | None = None) -> None:
        self._nodetool = nodetool or shutil.which("nodetool") or "nodetool"

    def __call__(self, host: str, port: str, *, timeout: float) -> str:
        cmd = [self._nodetool, "-h", host, "-p", port, "tpstats"]
        logger.debug("Executing %s", subprocess.list2cmdline(cmd))

        try:
            completed_process = subprocess.run(
                cmd,
                capture_output=True,
                encoding="utf8",
                check=False,
                timeout=timeout,
                env={k: v for k, v in os.environ.items() if k != "LANG"},
            )
        except FileNotFoundError as e:
            raise MKNodetoolError(f"nodetool not found: {self._nodetool}") from e
        except subprocess.TimeoutExpired as e:
            raise MKNodetoolError(f"nodetool timed out after {timeout:g} seconds") from e

        if completed_process.returncode:
            raise MKNodetoolError(
                "nodetool command failed: %s"
                % (completed_process.stderr or completed_process.stdout).strip()
            )
        return completed_process.stdout
