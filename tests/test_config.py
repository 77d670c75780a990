from pathlib import Path

import pytest

from gemstats.config import Settings


def test_relative_log_file_lives_under_logs_dir(tmp_path):
    s = Settings(LOGS_DIR=str(tmp_path / "logs"), LOG_FILE="gemstats.log")
    assert s.log_file == tmp_path / "logs" / "gemstats.log"


def test_absolute_log_file_is_kept(tmp_path):
    target = tmp_path / "elsewhere" / "app.log"
    s = Settings(LOGS_DIR=str(tmp_path / "logs"), LOG_FILE=str(target))
    assert s.log_file == target


def test_relative_db_file_resolves_against_project_root():
    s = Settings(DB_FILE="db/x.db")
    assert s.db_file.is_absolute()
    assert s.db_file.parts[-2:] == ("db", "x.db")
    assert s.db_file.parent.parent == Path(__file__).resolve().parent.parent


def test_top_limit_must_be_positive():
    with pytest.raises(ValueError):
        Settings(TOP_LIMIT=0)
