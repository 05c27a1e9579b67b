import os

import pytest

from maintlog.models import Identity

DATA_DIR = os.path.join(os.path.dirname(__file__), "data")


@pytest.fixture
def identity():
    return Identity(
        computer_name="SQL01",
        instance_name="MSSQLSERVER",
        sql_instance_name="SQL01",
    )


@pytest.fixture
def data_dir():
    return os.path.join(DATA_DIR, "SQL01")


@pytest.fixture
def single_block():
    return [
        "Database: [AdventureWorks]",
        "Status: ONLINE",
        "Command: ALTER INDEX [PK_Orders] ON [AdventureWorks].[dbo].[Orders] REBUILD WITH (ONLINE=ON)",
        "Comment: UpdateStatistics: null",
        "Outcome: Succeeded",
        "Duration: 00:00:12",
        "2017-05-01 02:00:15",
    ]
