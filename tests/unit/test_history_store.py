import json

import pytest

from automate_gpt.constants import HISTORY_KEY, SETTINGS_KEY
from automate_gpt.contracts import AppSettings, HistoryExport, WorkflowResult
from automate_gpt.persistence import HistoryStore, InMemoryKeyValueStore


def _record(n: int) -> WorkflowResult:
    return WorkflowResult(
        workflow_id="summarizer", input=f"input {n}", output=f"output {n}", tokens=n
    )


@pytest.mark.asyncio
async def test_history_is_newest_first_and_capped():
    store = HistoryStore(InMemoryKeyValueStore())
    records = [_record(i) for i in range(51)]
    for record in records:
        await store.save_result(record)

    history = await store.get_history()
    assert len(history) == 50
    assert history[0].id == records[-1].id
    assert history[-1].id == records[1].id
    assert records[0].id not in {r.id for r in history}


@pytest.mark.asyncio
async def test_history_is_namespaced_by_user():
    kv = InMemoryKeyValueStore()
    store = HistoryStore(kv)
    await store.save_result(_record(1), user_id="alice")
    await store.save_result(_record(2))

    assert [r.tokens for r in await store.get_history("alice")] == [1]
    assert [r.tokens for r in await store.get_history()] == [2]
    assert await kv.get(f"{HISTORY_KEY}_alice") is not None

    await store.clear_history("alice")
    assert await store.get_history("alice") == []
    assert len(await store.get_history()) == 1


@pytest.mark.asyncio
async def test_quota_shrinks_history_instead_of_failing():
    kv = InMemoryKeyValueStore(max_bytes=2_000)
    store = HistoryStore(kv)
    for i in range(30):
        await store.save_result(_record(i))

    history = await store.get_history()
    assert 1 <= len(history) < 30
    assert history[0].tokens == 29


@pytest.mark.asyncio
async def test_record_too_large_for_storage_is_dropped():
    store = HistoryStore(InMemoryKeyValueStore(max_bytes=50))
    await store.save_result(_record(1))
    assert await store.get_history() == []


@pytest.mark.asyncio
async def test_corrupt_history_reads_as_empty():
    kv = InMemoryKeyValueStore()
    await kv.set(HISTORY_KEY, {"not": "a list"})
    store = HistoryStore(kv)
    assert await store.get_history() == []

    await kv.set(HISTORY_KEY, [{"id": "broken"}])
    assert await store.get_history() == []


@pytest.mark.asyncio
async def test_settings_defaults_and_roundtrip():
    kv = InMemoryKeyValueStore()
    store = HistoryStore(kv)
    assert await store.get_settings() == AppSettings()

    await store.save_settings(AppSettings(model="gpt-4", max_tokens=2000), user_id="u1")
    assert await store.get_settings("u1") == AppSettings(model="gpt-4", max_tokens=2000)
    assert await store.get_settings() == AppSettings()

    await kv.set(SETTINGS_KEY, {"model": "gpt-4", "max_tokens": 99999})
    assert await store.get_settings() == AppSettings()


@pytest.mark.asyncio
async def test_export_writes_dated_file(tmp_path):
    store = HistoryStore(InMemoryKeyValueStore())
    await store.save_result(_record(1))
    await store.save_result(_record(2))

    path = await store.write_export(tmp_path, user_id=None)
    assert path.name.startswith("automate-gpt-history-")
    assert path.suffix == ".json"

    data = json.loads(path.read_text())
    assert data["count"] == 2
    export = HistoryExport.from_json(path.read_text())
    assert [r.tokens for r in export.results] == [2, 1]
    assert export.results == await store.get_history()


def test_history_limit_must_be_positive():
    with pytest.raises(ValueError):
        HistoryStore(InMemoryKeyValueStore(), history_limit=0)
