from stepwise.db.base import Base
from stepwise.db import models  # noqa: F401  ensure models are loaded


def test_metadata_contains_core_tables() -> None:
    table_names = set(Base.metadata.tables.keys())

    assert {"users", "goals", "tasks"}.issubset(table_names)


def test_task_metadata_column_keeps_its_name() -> None:
    columns = Base.metadata.tables["tasks"].columns

    assert "metadata" in columns
    assert columns["goal_id"].foreign_keys
