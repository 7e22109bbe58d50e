#!/usr/bin/env python3
# Copyright (C) 2024 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from collections.abc import Iterator

import pytest

from cassandra_tpstats.utils.log import clear_console_logging


@pytest.fixture(autouse=True)
def reset_console_logging() -> Iterator[None]:
    # main() attaches a handler to the captured stderr of the running test
    yield
    clear_console_logging()
