#!/usr/bin/env python3
# Copyright (C) 2024 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Thread pool stages known to the check"""

from __future__ import annotations

from typing import Final, Self

from cassandra_tpstats.utils.exceptions import MKConfigurationError

__all__ = ["KNOWN_STAGES", "StageName"]

KNOWN_STAGES: Final = frozenset(
    {
        "AntiEntropyStage",
        "CacheCleanupExecutor",
        "CommitLogArchiver",
        "CompactionExecutor",
        "CounterMutationStage",
        "GossipStage",
        "HintedHandoff",
        "InternalResponseStage",
        "MemtableFlushWriter",
        "MemtablePostFlush",
        "MemtableReclaimMemory",
        "MigrationStage",
        "MiscStage",
        "MutationStage",
        "PendingRangeCalculator",
        "ReadRepairStage",
        "ReadStage",
        "RequestResponseStage",
        "ValidationExecutor",
    }
)


class StageName:
    """Name of a thread pool stage that is part of KNOWN_STAGES

    >>> StageName("ReadStage")
    StageName('ReadStage')
    >>> StageName("ReplicateOnWriteStage")
    Traceback (most recent call last):
      ...
    cassandra_tpstats.utils.exceptions.MKConfigurationError: ERROR: Invalid Threadpool Specified
    """

    @classmethod
    def _validate_args(cls, /, __str: object) -> str:
        if not isinstance(__str, str):
            raise TypeError(f"{cls.__name__} must initialized from str")
        if not __str:
            raise MKConfigurationError("ERROR: No threadpool specified")
        if __str not in KNOWN_STAGES:
            raise MKConfigurationError("ERROR: Invalid Threadpool Specified")
        return __str

    def __getnewargs__(self) -> tuple[str]:
        return (str(self),)

    def __new__(cls, /, __str: str) -> Self:
        cls._validate_args(__str)
        return super().__new__(cls)

    def __init__(self, /, __str: str) -> None:
        self._value: Final = __str

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._value!r})"

    def __str__(self) -> str:
        return self._value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StageName):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    @classmethod
    def from_option(cls, value: str | None) -> StageName:
        if value is None:
            raise MKConfigurationError("ERROR: No threadpool specified")
        return cls(value)
