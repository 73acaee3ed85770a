import pytest
from mealadmin.domain.Resource_Type import DISCOUNT, SUPPLIER, UnknownField, WEEK
from mealadmin.events.Event_Bus import EventBus, RESOURCE_CREATED, RESOURCE_ERROR
from mealadmin.infra.exceptions import DuplicateIdentifier, RecordNotFound, StoreUnavailable
from mealadmin.infra.Json_Store import JsonRecordStore
from mealadmin.logic.listing.comparators import SortDirection
from mealadmin.logic.listing.pipeline import PageState, SortState
from mealadmin.logic.resources.service import ResourceService


class RacingStore(JsonRecordStore):
    """Simulates another session inserting the same display id right before us."""

    def __init__(self, *args, races: int = 1, **kwargs):
        super().__init__(*args, **kwargs)
        self.races = races

    async def create(self, draft):
        if self.races > 0:
            self.races -= 1
            await super().create(dict(draft, discount_name="other session"))
        return await super().create(draft)


class UnreachableStore(JsonRecordStore):
    async def find_most_recently_created(self):
        raise StoreUnavailable("connection refused")


def collect(bus: EventBus, name: str):
    events = []
    bus.subscribe(name, lambda event_name, payload: events.append(payload))
    return events


@pytest.mark.asyncio
async def test_create_allocates_sequential_ids(tmp_path):
    bus = EventBus()
    created = collect(bus, RESOURCE_CREATED)
    service = ResourceService(DISCOUNT, JsonRecordStore("discounts", "discount_id", data_dir=tmp_path), event_bus=bus)

    first = await service.create_record({"discount_name": "Uno", "discount_percentage": 5, "bogus": 1})
    second = await service.create_record({"discount_name": "Dos", "discount_percentage": 20})

    assert (first.display_id, second.display_id) == ("DES1", "DES2")
    assert "bogus" not in first.fields
    assert [e["display_id"] for e in created] == ["DES1", "DES2"]
    assert await service.next_display_id() == "DES3"


@pytest.mark.asyncio
async def test_create_reallocates_after_collision(tmp_path):
    store = RacingStore("discounts", "discount_id", data_dir=tmp_path, races=1)
    service = ResourceService(DISCOUNT, store)

    record = await service.create_record({"discount_name": "Mine"})

    assert record.display_id == "DES2"
    ids = [r.display_id for r in await service.list_records()]
    assert ids == ["DES1", "DES2"]


@pytest.mark.asyncio
async def test_create_gives_up_after_max_attempts(tmp_path):
    bus = EventBus()
    errors = collect(bus, RESOURCE_ERROR)
    store = RacingStore("discounts", "discount_id", data_dir=tmp_path, races=5)
    service = ResourceService(DISCOUNT, store, event_bus=bus, max_attempts=2)

    with pytest.raises(DuplicateIdentifier):
        await service.create_record({"discount_name": "Mine"})
    assert errors and errors[-1]["operation"] == "create"
    assert errors[-1]["display_id"] == "DES2"


@pytest.mark.asyncio
async def test_create_does_not_invent_id_when_store_is_down(tmp_path):
    bus = EventBus()
    errors = collect(bus, RESOURCE_ERROR)
    service = ResourceService(DISCOUNT, UnreachableStore("discounts", "discount_id", data_dir=tmp_path), event_bus=bus)

    with pytest.raises(StoreUnavailable):
        await service.create_record({"discount_name": "Uno"})
    assert await service.store.list() == []
    assert errors[0]["error"] == "connection refused"
    assert set(errors[0]) == {"resource", "operation", "error"}
    assert errors[0]["resource"] == "discount"


@pytest.mark.asyncio
async def test_update_delete_and_missing(tmp_path):
    service = ResourceService(DISCOUNT, JsonRecordStore("discounts", "discount_id", data_dir=tmp_path))
    record = await service.create_record({"discount_name": "Uno", "discount_percentage": 5})

    updated = await service.update_record(record.internal_id, {"discount_percentage": 7, "discount_id": "DES99"})
    assert updated.get("discount_percentage") == 7
    assert updated.display_id == "DES1"

    await service.delete_record(record.internal_id)
    with pytest.raises(RecordNotFound):
        await service.get_record(record.internal_id)


@pytest.mark.asyncio
async def test_toggle_active_only_for_suppliers(tmp_path):
    suppliers = ResourceService(SUPPLIER, JsonRecordStore("suppliers", "supplier_id", data_dir=tmp_path))
    supplier = await suppliers.create_record({"supplier_name": "Granja"})
    assert supplier.get("is_active") is True

    toggled = await suppliers.toggle_active(supplier.internal_id)
    assert toggled.get("is_active") is False

    discounts = ResourceService(DISCOUNT, JsonRecordStore("discounts", "discount_id", data_dir=tmp_path))
    with pytest.raises(UnknownField):
        await discounts.toggle_active("anything")


@pytest.mark.asyncio
async def test_weeks_newest_first_with_menu_names(tmp_path):
    menus = JsonRecordStore("weekly_menus", "menu_id", data_dir=tmp_path)
    menus.seed([{"id": "m1", "menu_id": "MENU1", "menu_name": "Classic"}])
    service = ResourceService(WEEK, JsonRecordStore("weeks", "week_id", data_dir=tmp_path), menu_store=menus)

    await service.create_record({"week_name": "Week 1", "weekly_menu": "MENU1"})
    await service.create_record({"week_name": "Week 2", "weekly_menu": "MENU9"})

    records = await service.list_records()
    assert [r.display_id for r in records] == ["WK2", "WK1"]
    assert records[1].get("menu_name") == "Classic"
    assert records[0].get("menu_name") is None

    view = await service.list_view("classic")
    assert [r.display_id for r in view.page_items] == ["WK1"]


@pytest.mark.asyncio
async def test_list_view_end_to_end(tmp_path):
    service = ResourceService(DISCOUNT, JsonRecordStore("discounts", "discount_id", data_dir=tmp_path))
    for name, pct in (("Uno", 5), ("Dos", 20), ("Tres", 10)):
        await service.create_record({"discount_name": name, "discount_percentage": pct})

    by_pct = SortState(DISCOUNT.field("discount_percentage"), SortDirection.ASC)
    view = await service.list_view("", by_pct, PageState(1, 2))
    assert [r.display_id for r in view.page_items] == ["DES1", "DES3"]
    assert view.total_pages == 2
