from datetime import datetime, timedelta, timezone

import pytest

from app.core.database import AsyncSessionLocal
from app.services.events import EventService
from scripts.cleanup_worker import cleanup_once
from scripts.import_events import import_csv
from tests.helpers import event_input

CSV_HEADER = "title,description,lat,lng,date,date_end\n"


@pytest.mark.asyncio
async def test_import_csv_loads_valid_rows_as_anonymous_events(db_engine, tmp_path):
    csv_file = tmp_path / "events.csv"
    csv_file.write_text(
        CSV_HEADER
        + "Harbour Buskers,Accordion and fiddle duo on the pier,53.34,-6.26,"
          "2026-07-01T17:00:00Z,2026-07-01T19:00:00Z\n"
        + "Bad Row,Ends before it starts which is wrong,53.34,-6.26,"
          "2026-07-01T17:00:00Z,2026-07-01T16:00:00Z\n"
        + "Puppet Show,Marionettes for kids in the park square,48.85,2.35,"
          "2026-07-02T10:00:00+02:00,2026-07-02T11:00:00+02:00\n",
        encoding="utf-8",
    )

    result = import_csv(str(csv_file), batch_size=1)

    assert result == {"imported": 2, "rejected": 1}
    async with AsyncSessionLocal() as session:
        events = await EventService(session).list_events()
    assert sorted(e.title for e in events) == ["Harbour Buskers", "Puppet Show"]
    assert all(e.user_id is None for e in events)


@pytest.mark.asyncio
async def test_import_csv_rejects_missing_headers(db_engine, tmp_path):
    csv_file = tmp_path / "events.csv"
    csv_file.write_text("title,lat,lng\nBuskers,1,2\n", encoding="utf-8")

    with pytest.raises(ValueError):
        import_csv(str(csv_file))


@pytest.mark.asyncio
async def test_cleanup_once_removes_finished_anonymous_events(db_engine, make_user, clock):
    await make_user("host-1")
    past = datetime.now(timezone.utc) - timedelta(days=1)
    async with AsyncSessionLocal() as session:
        service = EventService(session, clock=clock)
        await service.create_event(
            None, event_input(clock, date=past - timedelta(hours=2), date_end=past)
        )
        await service.create_event(
            "host-1", event_input(clock, is_host=True, date=past - timedelta(hours=2), date_end=past)
        )

    assert await cleanup_once() == 1
    assert await cleanup_once() == 0
