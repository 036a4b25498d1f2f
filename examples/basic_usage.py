"""
Basic usage example for batchlog.

Entries are buffered for one unit of work, gated by the user's settings,
and saved as a single batch at the end.
"""

import asyncio
import sys
from pathlib import Path

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from batchlog import ComponentLogger, SaveMethod, StaticSettingsProvider
from batchlog.plugins.sinks import StdoutJsonSink


async def main() -> None:
    """Log a small transaction and save it."""

    provider = StaticSettingsProvider(
        {
            "isEnabled": True,
            "userLoggingLevel": "INFO",
            "isConsoleLoggingEnabled": False,
            "defaultSaveMethodName": SaveMethod.EVENT_BUS.value,
        }
    )

    async with ComponentLogger(provider, StdoutJsonSink()) as logger:
        logger.set_scenario("order-import")
        logger.info("Import started").add_tag("nightly")
        logger.debug("Not buffered at INFO")

        try:
            raise ValueError("row 12 has no customer id")
        except ValueError as exc:
            logger.error("Import row rejected").set_error(exc).set_record_id("row-12")

        print(f"Buffered entries: {logger.get_buffer_size()}", file=sys.stderr)
        logger.save_log(SaveMethod.QUEUEABLE)


if __name__ == "__main__":
    asyncio.run(main())
