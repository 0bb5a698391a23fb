"""
Pytest configuration and shared fixtures.
"""
import os

# Must be set before app.config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SEED_ON_STARTUP"] = "false"
os.environ["ORDER_INTERVAL_SECONDS"] = "0.05"
os.environ["VALIDATE_ORDER_COFFEE_ID"] = "false"

import pytest_asyncio

from app.db.connection import init_db, close_db


@pytest_asyncio.fixture(scope="function")
async def database():
    """
    Fresh in-memory database for one test.

    Every init_db() builds a new engine, so nothing leaks between tests.
    """
    await init_db()

    yield

    await close_db()
