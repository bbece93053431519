#!/usr/bin/env python3
"""Delete expired captcha sessions

Generation already prunes lazily; this is for quiet periods or cron.
"""

import asyncio
import sys
from datetime import timedelta
from pathlib import Path

# make the project root importable
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from reliefhub.app.core.database import async_session_factory
from reliefhub.app.core.utils import utc_now_naive
from reliefhub.app.services.captcha_store import CaptchaStoreError, SQLCaptchaSessionStore


async def prune_captcha_sessions(grace_minutes: int = 0) -> int:
    """Delete sessions that expired more than grace_minutes ago"""
    cutoff = utc_now_naive() - timedelta(minutes=grace_minutes)
    async with async_session_factory() as session:
        store = SQLCaptchaSessionStore(session)
        return await store.delete_expired(cutoff)


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Delete expired captcha sessions")
    parser.add_argument(
        "--grace-minutes",
        type=int,
        default=0,
        help="only delete sessions expired at least this many minutes ago",
    )
    args = parser.parse_args()

    try:
        deleted = asyncio.run(prune_captcha_sessions(args.grace_minutes))
    except CaptchaStoreError as e:
        print(f"❌ Prune failed: {e}")
        sys.exit(1)
    print(f"✅ Deleted {deleted} expired captcha session(s)")
