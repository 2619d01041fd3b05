"""Run one cache cleanup: delete records written by caching agents that are no longer configured.

Usage:
    uv run python -m scripts.run_cache_cleanup [--verbose] [--no-lock]
Exit status is 0 when the run completed (even with per-data-type failures),
1 when it could not run.
Requires DATABASE_URL and AGENT_REGISTRY_PATH (see .env).
"""

import argparse
import asyncio
import sys

from cachesweep.core.config import get_settings
from cachesweep.domain.exceptions import CacheSweepException, CleanupTimeoutException
from cachesweep.infrastructure.factory import CleanupAgentFactory
from cachesweep.infrastructure.persistence.database import dispose_engine
from cachesweep.infrastructure.scheduling.scheduler import CleanupScheduler
from cachesweep.shared.telemetry.logging import setup_logging


async def main(argv: list[str] | None = None) -> int:
    """Run the cleanup agent once and print a summary."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    parser.add_argument(
        "--no-lock", action="store_true", help="Do not take the cluster-wide run lock"
    )
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose)
    settings = get_settings()
    if args.no_lock:
        settings = settings.model_copy(update={"cleanup_run_lock_enabled": False})
    agent = CleanupAgentFactory.create_cleanup_agent(settings)
    try:
        result = await CleanupScheduler(agent).run_now()
    except CleanupTimeoutException as e:
        print(
            f"Cleanup timed out: {e.message}; remaining records will be removed by the next run",
            file=sys.stderr,
        )
        return 1
    except CacheSweepException as e:
        print(f"Cleanup aborted: {e.message}", file=sys.stderr)
        return 1
    finally:
        await dispose_engine()

    if result.skipped:
        print("Skipped: another instance holds the cleanup run lock")
        return 0
    for table in result.tables:
        if table.deleted:
            print(f"{table.table_name} ({table.data_type}): deleted {table.deleted} record(s)")
    print(
        f"Done. {result.data_type_count} data type(s), total deleted: {result.total_deleted}, "
        f"failures: {result.failures}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
