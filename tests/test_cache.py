import sqlite3
from datetime import datetime, timedelta, timezone

import pytest

from crazydev.cache import CacheManager, default_cache_dir
from crazydev.models import AnalysisResult, FileStats


def _result(name="demo", analyzed_at=None):
    return AnalysisResult(
        project_path=f"/work/{name}",
        project_name=name,
        file_stats=FileStats(total_files=3, files_by_type={".py": 3}),
        dependencies={"requests": "2.31.0"},
        analyzed_at=analyzed_at or datetime.now(timezone.utc),
    )


@pytest.fixture
def manager(tmp_path):
    with CacheManager(tmp_path / "cache") as cache:
        yield cache


def _row_count(db_path, key):
    with sqlite3.connect(db_path) as db:
        return db.execute(
            "SELECT COUNT(*) FROM analysis_cache WHERE path = ?", (key,)
        ).fetchone()[0]


def _age_row(db_path, key, seconds):
    db = sqlite3.connect(db_path)
    with db:
        db.execute(
            "UPDATE analysis_cache SET timestamp = timestamp - ? WHERE path = ?", (seconds, key)
        )
    db.close()


def test_store_then_get_from_memory(manager):
    result = _result()
    manager.store_analysis("/work/demo", result)
    assert manager.get_analysis("/work/demo") is result


def test_missing_key_returns_none(manager):
    assert manager.get_analysis("/nowhere") is None


def test_result_persists_across_managers(tmp_path):
    result = _result()
    with CacheManager(tmp_path) as first:
        first.store_analysis("/work/demo", result)
    with CacheManager(tmp_path) as second:
        loaded = second.get_analysis("/work/demo")
    assert loaded == result


def test_database_file_is_named_context_db(tmp_path):
    with CacheManager(tmp_path) as cache:
        cache.store_analysis("/work/demo", _result())
        assert cache.cache_path == tmp_path / "context.db"
    assert _row_count(tmp_path / "context.db", "/work/demo") == 1


def test_invalidate_removes_from_memory_and_database(tmp_path):
    with CacheManager(tmp_path) as cache:
        cache.store_analysis("/work/demo", _result())
        cache.invalidate_analysis("/work/demo")
        assert cache.get_analysis("/work/demo") is None
    assert _row_count(tmp_path / "context.db", "/work/demo") == 0


def test_stale_database_row_is_dropped(tmp_path):
    with CacheManager(tmp_path) as cache:
        cache.store_analysis("/work/demo", _result())
    _age_row(tmp_path / "context.db", "/work/demo", 2 * 24 * 3600)
    with CacheManager(tmp_path) as cache:
        assert cache.get_analysis("/work/demo") is None
    assert _row_count(tmp_path / "context.db", "/work/demo") == 0


def test_cleanup_removes_only_old_rows(tmp_path):
    with CacheManager(tmp_path) as cache:
        cache.store_analysis("/work/old", _result("old"))
        cache.store_analysis("/work/new", _result("new"))
    _age_row(tmp_path / "context.db", "/work/old", 7200)
    with CacheManager(tmp_path) as cache:
        cache.cleanup_cache(timedelta(hours=1))
    assert _row_count(tmp_path / "context.db", "/work/old") == 0
    assert _row_count(tmp_path / "context.db", "/work/new") == 1


def test_memory_only_when_database_unavailable(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    with CacheManager(blocker / "cache") as cache:
        result = _result()
        cache.store_analysis("/work/demo", result)
        assert cache.get_analysis("/work/demo") is result
        cache.invalidate_analysis("/work/demo")
        assert cache.get_analysis("/work/demo") is None


def test_expired_memory_entry_without_database(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    old = datetime.now(timezone.utc) - timedelta(days=2)
    with CacheManager(blocker / "cache") as cache:
        cache.store_analysis("/work/demo", _result(analyzed_at=old))
        assert cache.get_analysis("/work/demo") is None


def test_expired_memory_entry_falls_back_to_fresh_row(tmp_path):
    old = datetime.now(timezone.utc) - timedelta(days=2)
    result = _result(analyzed_at=old)
    with CacheManager(tmp_path) as cache:
        cache.store_analysis("/work/demo", result)
        loaded = cache.get_analysis("/work/demo")
    assert loaded == result
    assert loaded is not result


def test_default_cache_dir_location():
    assert default_cache_dir().parts[-2:] == (".crazy-dev", "cache")