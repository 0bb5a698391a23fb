"""
Tests for the seed loader.
"""
import asyncio
import logging

import pytest

from app.db.connection import get_unit_of_work
from app.domain.entities import Coffee, StoreUnavailableError
from app.services.seed_loader import load_seed_data, reseed_catalog


async def current_catalog():
    async with get_unit_of_work() as uow:
        return await uow.coffees.list_all()


@pytest.mark.asyncio
async def test_reseed_replaces_catalog(database):
    async with get_unit_of_work(for_write=True) as uow:
        await uow.coffees.save(Coffee.create("Stale"))

    seeded = await reseed_catalog(["Espresso", "Macchiato"])

    catalog = await current_catalog()
    assert sorted(c.name for c in catalog) == ["Espresso", "Macchiato"]
    assert {c.id for c in catalog} == {c.id for c in seeded}


@pytest.mark.asyncio
async def test_reseed_generates_unique_ids(database):
    seeded = await reseed_catalog(["Espresso", "Espresso", "Espresso"])

    assert len({c.id for c in seeded}) == 3
    assert len(await current_catalog()) == 3


@pytest.mark.asyncio
async def test_reseed_logs_catalog_after_commit(database, caplog):
    with caplog.at_level(logging.INFO, logger="app.services.seed_loader"):
        seeded = await reseed_catalog(["Cold brew"])

    assert "Catalog reseeded" in caplog.text
    assert seeded[0].id in caplog.text


@pytest.mark.asyncio
async def test_load_seed_data_uses_configured_names(database, monkeypatch):
    from app.config import settings
    monkeypatch.setattr(settings, "seed_coffees", ["Kopi Luwak", "Frappuccino"])

    seeded = await load_seed_data()

    assert [c.name for c in seeded] == ["Kopi Luwak", "Frappuccino"]


@pytest.mark.asyncio
async def test_load_seed_data_logs_and_ignores_failures(caplog):
    """Database not initialized: nothing raised, error logged, empty result."""
    with caplog.at_level(logging.ERROR, logger="app.services.seed_loader"):
        seeded = await load_seed_data(["Espresso"])

    assert seeded == []
    assert "Failed to load seed data" in caplog.text


@pytest.mark.asyncio
async def test_reseed_propagates_store_errors():
    with pytest.raises(StoreUnavailableError):
        await reseed_catalog(["Espresso"])


@pytest.mark.asyncio
async def test_concurrent_reseeds_do_not_interleave(database):
    """Write units are serialised: the result is exactly one of the two lists."""
    first = ["Irish coffee", "Cappuccino", "Kopi Luwak"]
    second = ["Espresso", "Macchiato"]

    await asyncio.gather(reseed_catalog(first), reseed_catalog(second))

    names = sorted(c.name for c in await current_catalog())
    assert names in (sorted(first), sorted(second))
