import json
import pytest
from mealadmin.infra.exceptions import DuplicateIdentifier, RecordNotFound, StoreUnavailable
from mealadmin.infra.Json_Store import JsonRecordStore


@pytest.fixture
def store(tmp_path):
    return JsonRecordStore("taxes", "tax_id", data_dir=tmp_path)


@pytest.mark.asyncio
async def test_create_assigns_store_fields(store):
    record = await store.create({"tax_id": "TAX1", "tax_name": "IVA", "tax_percentage": 16, "id": "ignored"})
    assert record.internal_id and record.internal_id != "ignored"
    assert record.display_id == "TAX1"
    assert record.created_at == record.updated_at
    assert record.get("tax_name") == "IVA"
    assert store.path.exists()


@pytest.mark.asyncio
async def test_list_in_creation_order(store):
    for n in (1, 2, 3):
        await store.create({"tax_id": f"TAX{n}", "tax_name": f"t{n}"})
    assert [r.display_id for r in await store.list()] == ["TAX1", "TAX2", "TAX3"]
    latest = await store.find_most_recently_created()
    assert latest.display_id == "TAX3"


@pytest.mark.asyncio
async def test_empty_table(store):
    assert await store.list() == []
    assert await store.find_most_recently_created() is None


@pytest.mark.asyncio
async def test_duplicate_display_id_rejected(store):
    await store.create({"tax_id": "TAX1"})
    with pytest.raises(DuplicateIdentifier) as info:
        await store.create({"tax_id": "TAX1"})
    assert info.value.display_id == "TAX1"
    assert len(await store.list()) == 1


@pytest.mark.asyncio
async def test_update_and_delete(store):
    record = await store.create({"tax_id": "TAX1", "tax_name": "IVA"})
    updated = await store.update(record.internal_id, {"tax_name": "IVA 16", "created_at": "1999-01-01"})
    assert updated.get("tax_name") == "IVA 16"
    assert updated.created_at == record.created_at
    assert (await store.get(record.internal_id)).get("tax_name") == "IVA 16"

    await store.delete(record.internal_id)
    assert await store.list() == []
    with pytest.raises(RecordNotFound):
        await store.delete(record.internal_id)
    with pytest.raises(RecordNotFound):
        await store.update(record.internal_id, {"tax_name": "x"})


@pytest.mark.asyncio
async def test_corrupt_file_is_unavailable_not_empty(store):
    store.path.write_text("{not json", encoding="utf-8")
    with pytest.raises(StoreUnavailable):
        await store.list()
    with pytest.raises(StoreUnavailable):
        await store.find_most_recently_created()


@pytest.mark.asyncio
async def test_seed_replaces_rows(tmp_path):
    menus = JsonRecordStore("weekly_menus", "menu_id", data_dir=tmp_path)
    menus.seed([{"id": "m1", "menu_id": "MENU1", "menu_name": "Classic", "created_at": "2024-01-01T00:00:00+00:00"}])
    assert json.loads(menus.path.read_text(encoding="utf-8"))[0]["menu_name"] == "Classic"
    assert [m.display_id for m in await menus.list()] == ["MENU1"]
