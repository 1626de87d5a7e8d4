"""
CSV Import Script for third-party events

Imported events are anonymous (no host), so anyone can clean them up once
they have ended.

Usage:
    python scripts/import_events.py <path-to-csv>

CSV Format:
    title,description,lat,lng,date,date_end
"""

import sys
import csv
from pathlib import Path

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from pydantic import ValidationError
from sqlalchemy import insert
from sqlalchemy.orm import sessionmaker
from app.core.database import sync_engine
from app.models import Event
from app.schemas.event import EventCreate
import structlog

logger = structlog.get_logger()

REQUIRED_HEADERS = {'title', 'description', 'lat', 'lng', 'date', 'date_end'}


def parse_row(row: dict) -> dict:
    """Validate a CSV row with the same rules as ``events.create``"""
    data = EventCreate(
        title=row['title'],
        description=row['description'],
        lat=row['lat'],
        lng=row['lng'],
        date=row['date'],
        date_end=row['date_end'],
        is_host=False,
    )
    return {
        "title": data.title,
        "description": data.description,
        "lat": data.lat,
        "lng": data.lng,
        "date": data.date,
        "date_end": data.date_end,
        "user_id": None,
    }


def import_csv(file_path: str, batch_size: int = 500, engine=None) -> dict[str, int]:
    """
    Import anonymous events from CSV file

    Args:
        file_path: Path to CSV file
        batch_size: Number of events to insert per transaction

    Returns:
        dict with 'imported' and 'rejected' counts
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    Session = sessionmaker(bind=engine or sync_engine)

    total_imported = 0
    total_rejected = 0

    with Session() as session:
        with open(file_path, 'r', encoding='utf-8') as f:
            reader = csv.DictReader(f)

            if not REQUIRED_HEADERS.issubset(reader.fieldnames or []):
                raise ValueError(
                    f"CSV must have headers: {sorted(REQUIRED_HEADERS)}, found: {reader.fieldnames}"
                )

            batch = []

            for i, row in enumerate(reader, 1):
                try:
                    batch.append(parse_row(row))
                except ValidationError as e:
                    total_rejected += 1
                    logger.warning("import_row_rejected", row=i, errors=e.error_count())
                    continue

                if len(batch) >= batch_size:
                    session.execute(insert(Event), batch)
                    session.commit()
                    total_imported += len(batch)
                    logger.info("import_batch_committed", imported=total_imported, rejected=total_rejected)
                    batch = []

            # Insert remaining events
            if batch:
                session.execute(insert(Event), batch)
                session.commit()
                total_imported += len(batch)

    logger.info("import_completed", imported=total_imported, rejected=total_rejected)
    return {"imported": total_imported, "rejected": total_rejected}


def main():
    if len(sys.argv) != 2:
        print("Usage: python scripts/import_events.py <path-to-csv>")
        sys.exit(1)

    try:
        result = import_csv(sys.argv[1])
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    print("\n" + "=" * 50)
    print("Import completed!")
    print(f"Total imported: {result['imported']}")
    print(f"Total rejected: {result['rejected']}")
    print("=" * 50)


if __name__ == "__main__":
    main()
