"""
Cleanup Worker - Removes anonymous events that have already ended

Usage:
    python scripts/cleanup_worker.py          # run forever
    python scripts/cleanup_worker.py --once   # single pass
"""
import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.config import settings
from app.core.database import AsyncSessionLocal, async_engine
from app.services.events import EventService
import structlog

logger = structlog.get_logger()


async def cleanup_once(session_factory=AsyncSessionLocal) -> int:
    """Run one purge pass and return the number of events removed"""
    async with session_factory() as session:
        return await EventService(session).purge_finished_anonymous()


async def run_forever(interval: int):
    logger.info("cleanup_worker_started", interval_seconds=interval)
    while True:
        try:
            removed = await cleanup_once()
            if removed:
                print(f"Removed {removed} finished anonymous events")
        except Exception as e:
            logger.error("cleanup_pass_failed", error=str(e))
        await asyncio.sleep(interval)


async def _main(once: bool):
    try:
        if once:
            removed = await cleanup_once()
            print(f"Removed {removed} finished anonymous events")
        else:
            await run_forever(settings.cleanup_interval_seconds)
    finally:
        await async_engine.dispose()


def main():
    """Main worker loop"""
    once = "--once" in sys.argv[1:]

    if not once:
        print("Cleanup Worker started. Press Ctrl+C to stop.")

    try:
        asyncio.run(_main(once))
    except KeyboardInterrupt:
        logger.info("cleanup_worker_stopped")
        print("\nWorker stopped.")


if __name__ == "__main__":
    main()
