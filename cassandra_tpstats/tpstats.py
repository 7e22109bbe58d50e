#!/usr/bin/env python3
# Copyright (C) 2024 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Parse the output of nodetool tpstats"""

# Example output of nodetool -h localhost tpstats:
# Pool Name                    Active   Pending      Completed   Blocked  All time blocked
# ReadStage                         0         0         282971         0                 0
# RequestResponseStage              0         0          32926         0                 0
# MutationStage                     0         0        3216105         0                 0
# ReadRepairStage                   0         0              0         0                 0
# GossipStage                       0         0              0         0                 0
# MigrationStage                    0         0            188         0                 0
# MiscStage                         0         0              0         0                 0
# InternalResponseStage             0         0            179         0                 0
# HintedHandoff                     0         0              0         0                 0
#
# Message type           Dropped
# RANGE_SLICE                  0
# READ_REPAIR                  0
# READ                         0
# MUTATION                     0
# REQUEST_RESPONSE             0

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Final

from cassandra_tpstats.stages import StageName
from cassandra_tpstats.utils.log import logger, VERBOSE

_HEADER_PREFIXES: Final = ("Pool Name", "Message type")


@dataclass(frozen=True)
class ThreadPoolRow:
    """Counters of one stage, as written by nodetool

    The counters are kept as the digits found in the report. The payload
    of the check result repeats them literally, comparisons use the
    integer properties.
    """

    stage: str
    active_text: str
    pending_text: str
    completed_text: str
    blocked_text: str

    @property
    def active(self) -> int:
        return int(self.active_text)

    @property
    def pending(self) -> int:
        return int(self.pending_text)

    @property
    def completed(self) -> int:
        return int(self.completed_text)

    @property
    def blocked(self) -> int:
        return int(self.blocked_text)

    def to_payload(self) -> Mapping[str, Mapping[str, str]]:
        """
        >>> ThreadPoolRow("ReadStage", "0", "007", "1", "0").to_payload()
        {'thread': {'stage': 'ReadStage', 'active': '0', 'pending': '007', 'completed': '1', 'blocked': '0'}}
        """
        return {
            "thread": {
                "stage": self.stage,
                "active": self.active_text,
                "pending": self.pending_text,
                "completed": self.completed_text,
                "blocked": self.blocked_text,
            }
        }


def _row_pattern(stage: StageName) -> re.Pattern[str]:
    # The all time blocked column must be present but is not reported.
    return re.compile(
        rf"{re.escape(str(stage))}\s+(\d+)\s+(\d+)\s+(\d+)\s+(\d+)\s+\d+",
        re.ASCII,
    )


def _is_header(line: str) -> bool:
    return line.lstrip().startswith(_HEADER_PREFIXES)


def parse_tpstats(report: str, stage: StageName) -> ThreadPoolRow | None:
    """Extract the counters of `stage` from the output of `nodetool tpstats`

    Only a line consisting of exactly the stage name followed by five
    numbers matches, so "ReadStage" never picks up "ReadRepairStage".
    The first matching line wins. Returns None if there is no such line.

    >>> parse_tpstats("ReadRepairStage 1 2 3 4 5\\nReadStage 0 25 282971 0 0", StageName("ReadStage"))
    ThreadPoolRow(stage='ReadStage', active_text='0', pending_text='25', completed_text='282971', blocked_text='0')
    >>> parse_tpstats("", StageName("ReadStage")) is None
    True
    """
    lines = report.splitlines()
    pattern = _row_pattern(stage)

    for line in lines:
        if _is_header(line):
            continue

        if (match := pattern.fullmatch(line.strip())) is None:
            continue

        active, pending, completed, blocked = match.groups()
        row = ThreadPoolRow(str(stage), active, pending, completed, blocked)
        logger.log(VERBOSE, "Found row for %s: %r", stage, line.strip())
        return row

    logger.debug("No row for %s in %d lines", stage, len(lines))
    return None
