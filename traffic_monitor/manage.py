"""Install / uninstall the traffic monitor schema.

Usage:
    python -m traffic_monitor.manage install
    python -m traffic_monitor.manage uninstall
"""

import argparse
import asyncio
import sys

from traffic_monitor.config import get_settings
from traffic_monitor.infrastructure.database import engine, ensure_sqlite_directory
from traffic_monitor.infrastructure.database.repositories import SQLAlchemyTrafficStore
from traffic_monitor.infrastructure.logging.log_config import setup_logging


async def _run(command: str) -> bool:
    store = SQLAlchemyTrafficStore(engine)
    try:
        if command == "install":
            ensure_sqlite_directory(get_settings().database_url)
            return await store.initialize_schema()
        return await store.teardown_schema()
    finally:
        await engine.dispose()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("command", choices=["install", "uninstall"])
    args = parser.parse_args(argv)

    setup_logging()
    ok = asyncio.run(_run(args.command))
    print(f"{args.command}: {'done' if ok else 'FAILED (see log)'}")
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
