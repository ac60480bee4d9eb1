import threading

from db.database import MILLIS_PER_HOUR, Database
from db.models import PoemRecord

NOW_MS = 1_760_000_000_000


def _record(timestamp, label="10:33 AM", text="a poem"):
    return PoemRecord(timestamp=timestamp, time_label=label, text=text, model_id="test/model")


def test_creates_missing_directory(tmp_path):
    db = Database(tmp_path / "nested" / "dir" / "poems.db")
    try:
        assert (tmp_path / "nested" / "dir").is_dir()
    finally:
        db.close()


def test_uses_write_ahead_log(db):
    row = db.fetchall("PRAGMA journal_mode")[0]
    assert list(row.values())[0].lower() == "wal"


def test_schema_creation_is_idempotent(tmp_path):
    path = tmp_path / "poems.db"
    first = Database(path)
    first.save_poem(_record(NOW_MS))
    first.close()

    second = Database(path)
    try:
        assert len(second.list_recent(10)) == 1
    finally:
        second.close()


def test_save_and_list_recent_newest_first(db):
    for offset, label in [(0, "10:31 AM"), (2, "10:33 AM"), (1, "10:32 AM")]:
        assert db.save_poem(_record(NOW_MS + offset * 60_000, label=label))

    poems = db.list_recent(10)
    assert [p.time_label for p in poems] == ["10:33 AM", "10:32 AM", "10:31 AM"]
    assert all(p.id is not None for p in poems)
    assert all(p.created_at for p in poems)
    assert poems[0].model_id == "test/model"


def test_list_recent_respects_limit(db):
    for i in range(5):
        db.save_poem(_record(NOW_MS + i))

    poems = db.list_recent(2)
    assert [p.timestamp for p in poems] == [NOW_MS + 4, NOW_MS + 3]


def test_prune_removes_only_records_before_cutoff(db):
    cutoff = NOW_MS - 24 * MILLIS_PER_HOUR
    db.save_poem(_record(cutoff - 1, label="old"))
    db.save_poem(_record(cutoff - MILLIS_PER_HOUR, label="older"))
    db.save_poem(_record(cutoff, label="edge"))
    db.save_poem(_record(NOW_MS, label="fresh"))

    deleted = db.prune_poems(24, now_ms=NOW_MS)

    assert deleted == 2
    assert {p.time_label for p in db.list_recent(10)} == {"edge", "fresh"}


def test_prune_with_nothing_to_delete(db):
    db.save_poem(_record(NOW_MS))
    assert db.prune_poems(1, now_ms=NOW_MS) == 0


def test_write_failures_are_not_raised(db):
    db.execute("DROP TABLE poems")

    assert db.save_poem(_record(NOW_MS)) is False
    assert db.prune_poems(24, now_ms=NOW_MS) == 0


def test_writes_from_worker_threads(db):
    def worker(i):
        db.save_poem(_record(NOW_MS + i))

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(db.list_recent(10)) == 4


def test_to_dict_uses_column_names(db):
    db.save_poem(_record(NOW_MS, label="10:33 AM", text="line one\nline two"))
    row = db.list_recent(1)[0].to_dict()

    assert row["time_string"] == "10:33 AM"
    assert row["poem"] == "line one\nline two"
    assert row["model_used"] == "test/model"
    assert row["timestamp"] == NOW_MS
    assert set(row) == {"id", "timestamp", "time_string", "poem", "model_used", "created_at"}


def test_close_releases_connections(tmp_path):
    db = Database(tmp_path / "poems.db")
    worker = threading.Thread(target=lambda: db.save_poem(_record(NOW_MS)))
    worker.start()
    worker.join()

    db.close()

    reopened = Database(tmp_path / "poems.db")
    try:
        assert len(reopened.list_recent(10)) == 1
    finally:
        reopened.close()
