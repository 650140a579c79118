import asyncio
import json
from datetime import datetime, timezone

import pytest

from speakwell.adapters.history_store import JsonHistoryStore
from speakwell.core.models import AnalysisMetrics, AnalysisResult, HistoryEntry


def _entry(entry_id, duration=45):
    return HistoryEntry(
        id=entry_id,
        date=datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc),
        duration=duration,
        location=f"/tmp/{entry_id}.wav",
        transcript="Hello world. This is a test.",
        analysis=AnalysisResult(
            score=5.0,
            feedback="Try to speak more.",
            metrics=AnalysisMetrics(word_count=6, sentence_count=2, avg_words_per_sentence=3.0),
        ),
    )


def test_append_persists_most_recent_first(tmp_path):
    path = tmp_path / "recordings.json"

    async def scenario():
        store = JsonHistoryStore(path)
        await store.load()
        await store.append(_entry("1"))
        await store.append(_entry("2"))

        reloaded = JsonHistoryStore(path)
        await reloaded.load()
        return store.list(), reloaded.list()

    in_memory, reloaded = asyncio.run(scenario())

    assert [e.id for e in in_memory] == ["2", "1"]
    assert reloaded == in_memory


def test_remove_keeps_order_of_the_rest(tmp_path):
    path = tmp_path / "recordings.json"

    async def scenario():
        store = JsonHistoryStore(path)
        for entry_id in ("a", "b", "c"):
            await store.append(_entry(entry_id))
        removed = await store.remove("b")
        missing = await store.remove("zzz")
        return store, removed, missing

    store, removed, missing = asyncio.run(scenario())

    assert removed is True
    assert missing is False
    assert [e.id for e in store.list()] == ["c", "a"]
    assert [item["id"] for item in json.loads(path.read_text())] == ["c", "a"]


def test_list_returns_a_copy(tmp_path):
    async def scenario():
        store = JsonHistoryStore(tmp_path / "recordings.json")
        await store.append(_entry("1"))
        listed = store.list()
        listed.clear()
        return store.list()

    assert len(asyncio.run(scenario())) == 1


def test_load_missing_file_is_empty(tmp_path):
    store = JsonHistoryStore(tmp_path / "nope.json")
    asyncio.run(store.load())
    assert store.list() == []


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        '{"id": "1"}',
        '[{"id": "1", "date": "2026-10-18T09:30:00Z"}]',
    ],
)
def test_load_malformed_file_is_empty(tmp_path, content, caplog):
    path = tmp_path / "recordings.json"
    path.write_text(content)
    store = JsonHistoryStore(path)

    asyncio.run(store.load())

    assert store.list() == []
    assert "Error loading recordings" in caplog.text


def test_load_accepts_utc_z_timestamps(tmp_path):
    path = tmp_path / "recordings.json"
    data = _entry("1").to_dict()
    data["date"] = "2026-10-18T09:30:00.000Z"
    path.write_text(json.dumps([data]))
    store = JsonHistoryStore(path)

    asyncio.run(store.load())

    [entry] = store.list()
    assert entry.date == datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)
    assert entry.analysis.metrics.word_count == 6


def test_failed_write_rolls_back(tmp_path, monkeypatch):
    store = JsonHistoryStore(tmp_path / "recordings.json")

    def broken_write(entries):
        raise OSError("disk full")

    monkeypatch.setattr(store, "_write", broken_write)

    with pytest.raises(OSError):
        asyncio.run(store.append(_entry("1")))

    assert store.list() == []
