#!/usr/bin/env python3
# Copyright (C) 2024 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""User-defined exceptions of the thread pool check."""

__all__ = [
    "MKConfigurationError",
    "MKNodetoolError",
    "MKStageNotFound",
    "MKTPStatsException",
]


# never used directly in the code. Just some wrapper to make all of our
# exceptions handleable with one call
class MKTPStatsException(Exception):
    pass


class MKConfigurationError(MKTPStatsException, ValueError):
    """The check was called with missing or invalid options.

    Raised before nodetool is executed. Results in an UNKNOWN state.
    """


class MKNodetoolError(MKTPStatsException):
    """nodetool could not be executed or exited with an error."""


class MKStageNotFound(MKTPStatsException):
    """The requested stage has no row in the tpstats output."""

    def __init__(self, stage: str) -> None:
        super().__init__(f"Thread pool stage {stage} not found in nodetool tpstats output")
        self.stage = stage
