#!/usr/bin/env python3
# Copyright (C) 2024 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import copy
import pickle

import pytest

from cassandra_tpstats.stages import KNOWN_STAGES, StageName
from cassandra_tpstats.utils.exceptions import MKConfigurationError


def test_known_stages() -> None:
    assert len(KNOWN_STAGES) == 19
    assert "ReadStage" in KNOWN_STAGES
    assert "ReplicateOnWriteStage" not in KNOWN_STAGES


@pytest.mark.parametrize("name", sorted(KNOWN_STAGES))
def test_stage_name_valid(name: str) -> None:
    assert str(StageName(name)) == name


@pytest.mark.parametrize(
    "name", ["UnknownStage", "readstage", "ReadStage ", "Read", "ReadStage|MiscStage", ".*"]
)
def test_stage_name_invalid(name: str) -> None:
    with pytest.raises(MKConfigurationError, match="Invalid Threadpool Specified"):
        StageName(name)


@pytest.mark.parametrize("value", [None, ""])
def test_stage_name_missing(value: str | None) -> None:
    with pytest.raises(MKConfigurationError, match="No threadpool specified"):
        StageName.from_option(value)


def test_stage_name_wrong_type() -> None:
    with pytest.raises(TypeError):
        StageName(23)  # type: ignore[arg-type]


def test_stage_name_equal() -> None:
    assert StageName("ReadStage") == StageName("ReadStage")
    assert StageName("ReadStage") != StageName("ReadRepairStage")
    assert {StageName("ReadStage"): None}.keys() == {StageName("ReadStage")}


def test_copyability() -> None:
    stage = StageName("GossipStage")
    assert stage == copy.copy(stage)
    assert stage == copy.deepcopy(stage)
    assert stage == pickle.loads(pickle.dumps(stage))
