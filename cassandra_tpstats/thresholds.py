#!/usr/bin/env python3
# Copyright (C) 2024 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Levels on the pending and blocked counters of a thread pool stage"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

from pydantic import BaseModel, ConfigDict

from cassandra_tpstats.tpstats import ThreadPoolRow
from cassandra_tpstats.utils.log import logger, VERBOSE
from cassandra_tpstats.utils.statename import State

DISABLED: Final = -1


class ThresholdConfig(BaseModel):
    """Levels on the pending and blocked counters of a stage

    A negative level disables it. Warning levels are not required to
    be lower than critical levels.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    warning_pending: int = DISABLED
    critical_pending: int = 15
    warning_blocked: int = DISABLED
    critical_blocked: int = 0


@dataclass(frozen=True)
class Verdict:
    state: State
    row: ThreadPoolRow

    def payload(self) -> str:
        return json.dumps(self.row.to_payload(), separators=(",", ":"))


def _pending_exceeded(pending: int, level: int) -> bool:
    return level >= 0 and pending >= level


def _blocked_exceeded(blocked: int, level: int) -> bool:
    # blocked has to be strictly above the level, unlike pending
    return level >= 0 and blocked > level


def evaluate(row: ThreadPoolRow, config: ThresholdConfig) -> Verdict:
    """Map the counters of a stage to a single state

    Critical levels are checked first, so the worst state wins.

    >>> row = ThreadPoolRow("ReadStage", "0", "25", "282971", "0")
    >>> evaluate(row, ThresholdConfig(warning_pending=10)).state
    <State.CRIT: 2>
    >>> evaluate(row, ThresholdConfig(critical_pending=-1)).state
    <State.OK: 0>
    """
    for state, pending_level, blocked_level in (
        (State.CRIT, config.critical_pending, config.critical_blocked),
        (State.WARN, config.warning_pending, config.warning_blocked),
    ):
        if _pending_exceeded(row.pending, pending_level):
            logger.log(
                VERBOSE, "%s: pending %d >= %d", state.name, row.pending, pending_level
            )
            return Verdict(state, row)
        if _blocked_exceeded(row.blocked, blocked_level):
            logger.log(
                VERBOSE, "%s: blocked %d > %d", state.name, row.blocked, blocked_level
            )
            return Verdict(state, row)

    return Verdict(State.OK, row)


def _render_levels(warn: int, crit: int) -> str:
    return ";".join("" if level < 0 else str(level) for level in (warn, crit))


def perfdata(row: ThreadPoolRow, config: ThresholdConfig) -> Sequence[str]:
    """
    >>> perfdata(ThreadPoolRow("ReadStage", "0", "25", "282971", "0"), ThresholdConfig())
    ['active=0', 'pending=25;;15', 'completed=282971c', 'blocked=0;;0']
    """
    return [
        f"active={row.active}",
        f"pending={row.pending};{_render_levels(config.warning_pending, config.critical_pending)}",
        f"completed={row.completed}c",
        f"blocked={row.blocked};{_render_levels(config.warning_blocked, config.critical_blocked)}",
    ]
