import logging

import pytest

from regommend import Table

SCENARIO = {
    "u1": {"f1": 2.0, "f2": 0.0},
    "u2": {"f1": 1.0, "f3": 3.0},
}


@pytest.fixture
def tbl():
    return Table("test")


@pytest.fixture
def scenario_table(tbl):
    for key, data in SCENARIO.items():
        tbl.add(key, data)
    return tbl


@pytest.fixture(params=[False, True], ids=["shared", "full"])
def full_magnitude(request):
    return request.param


@pytest.fixture
def table_logger(caplog):
    caplog.set_level(logging.DEBUG, logger="regommend.test")
    return logging.getLogger("regommend.test")
