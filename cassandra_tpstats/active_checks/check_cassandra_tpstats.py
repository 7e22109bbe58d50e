#!/usr/bin/env python3
# Copyright (C) 2024 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""check_cassandra_tpstats - Monitor a thread pool stage of a Cassandra node

Usage:
    check_cassandra_tpstats --threadpool CommitLogArchiver -w 10 -W 0 -c 15 -C 5

Output:
    CheckCassandraTPStats CRITICAL: {"thread":{"stage":"CommitLogArchiver","active":"0",\
"pending":"25","completed":"0","blocked":"0"}} | active=0 pending=25;10;15 ...
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from typing import NoReturn

from pydantic import BaseModel, Field, ValidationError

from cassandra_tpstats.nodetool import NodetoolTPStats, ReportSourceProto
from cassandra_tpstats.stages import StageName
from cassandra_tpstats.thresholds import DISABLED, evaluate, perfdata, ThresholdConfig
from cassandra_tpstats.tpstats import parse_tpstats
from cassandra_tpstats.utils.exceptions import (
    MKConfigurationError,
    MKNodetoolError,
    MKStageNotFound,
)
from cassandra_tpstats.utils.log import setup_console_logging
from cassandra_tpstats.utils.statename import service_state_name, State

CHECK_NAME = "CheckCassandraTPStats"


class Args(BaseModel):
    host: str
    port: int
    threadpool: None | str
    warning_pending: int
    crit_pending: int
    warning_blocked: int
    crit_blocked: int
    nodetool: None | str
    timeout: float = Field(gt=0)
    verbose: int
    debug: bool

    def thresholds(self) -> ThresholdConfig:
        return ThresholdConfig(
            warning_pending=self.warning_pending,
            critical_pending=self.crit_pending,
            warning_blocked=self.warning_blocked,
            critical_blocked=self.crit_blocked,
        )


class _ArgumentParser(argparse.ArgumentParser):
    """Report option errors as UNKNOWN instead of exiting with 2 (CRITICAL)"""

    def error(self, message: str) -> NoReturn:
        raise MKConfigurationError(f"ERROR: {message}")


def parse_arguments(argv: Sequence[str]) -> Args:
    parser = _ArgumentParser(
        prog="check_cassandra_tpstats",
        description="Check the pending and blocked tasks of a Cassandra thread pool stage "
        "using nodetool tpstats.",
    )
    parser.add_argument(
        "-H",
        "--host",
        type=str,
        metavar="HOSTNAME",
        default="localhost",
        help="Cassandra hostname (Default: localhost)",
    )
    parser.add_argument(
        "-P",
        "--port",
        type=int,
        metavar="PORT",
        default=7199,
        help="Cassandra JMX port (Default: 7199)",
    )
    parser.add_argument(
        "-T",
        "--threadpool",
        type=str,
        metavar="THREADPOOL",
        default=None,
        help="Thread pool stage name, e.g. ReadStage",
    )
    parser.add_argument(
        "-w",
        "--warning_pending",
        type=int,
        metavar="WARNING_PENDING",
        default=DISABLED,
        help="Warning level for pending tasks. Negative values disable the level (Default: -1)",
    )
    parser.add_argument(
        "-c",
        "--crit_pending",
        type=int,
        metavar="CRIT_PENDING",
        default=15,
        help="Critical level for pending tasks (Default: 15)",
    )
    parser.add_argument(
        "-W",
        "--warning_blocked",
        type=int,
        metavar="WARNING_BLOCKED",
        default=DISABLED,
        help="Warning if more blocked tasks than this. Negative values disable the level "
        "(Default: -1)",
    )
    parser.add_argument(
        "-C",
        "--crit_blocked",
        type=int,
        metavar="CRIT_BLOCKED",
        default=0,
        help="Critical if more blocked tasks than this (Default: 0)",
    )
    parser.add_argument(
        "--nodetool",
        type=str,
        metavar="PATH",
        default=None,
        help="Path to the nodetool executable (Default: nodetool from the search path)",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        type=float,
        metavar="TIMEOUT",
        default=30.0,
        help="Seconds before nodetool is aborted (Default: 30)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Verbose mode, log to stderr (-vv for debug output)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Debug mode: let Python exceptions come through.",
    )
    try:
        return Args.model_validate(vars(parser.parse_args(argv)))
    except ValidationError as e:
        raise MKConfigurationError(
            "ERROR: "
            + ", ".join(
                "{}: {}".format(".".join(map(str, err["loc"])), err["msg"]) for err in e.errors()
            )
        ) from e


def output_check_result(state: State, summary: str, perf: Sequence[str] = ()) -> None:
    s = f"{CHECK_NAME} {service_state_name(state)}: {summary}"
    if perf:
        s += " | %s" % " ".join(perf)
    sys.stdout.write("%s\n" % s)


def check_tpstats(args: Args, report_source: ReportSourceProto) -> tuple[State, str, Sequence[str]]:
    # validate before nodetool is executed
    stage = StageName.from_option(args.threadpool)
    thresholds = args.thresholds()

    report = report_source(args.host, str(args.port), timeout=args.timeout)

    if (row := parse_tpstats(report, stage)) is None:
        raise MKStageNotFound(str(stage))

    verdict = evaluate(row, thresholds)
    return verdict.state, verdict.payload(), perfdata(row, thresholds)


def main(
    argv: Sequence[str] | None = None,
    report_source: ReportSourceProto | None = None,
) -> int:
    try:
        args = parse_arguments(sys.argv[1:] if argv is None else argv)
    except MKConfigurationError as e:
        output_check_result(State.UNKNOWN, str(e))
        return int(State.UNKNOWN)

    setup_console_logging(args.verbose)

    try:
        state, summary, perf = check_tpstats(
            args, report_source or NodetoolTPStats(args.nodetool)
        )
    except (MKConfigurationError, MKNodetoolError, MKStageNotFound) as e:
        if args.debug:
            raise
        state, summary, perf = State.UNKNOWN, str(e), ()
    except Exception as e:
        if args.debug:
            raise
        state, summary, perf = State.UNKNOWN, f"Unhandled exception: {e}", ()

    output_check_result(state, summary, perf)
    return int(state)


if __name__ == "__main__":
    sys.exit(main())
