#!/usr/bin/env python3
"""
CLI tool to reseed or inspect the coffee catalog.

Usage:
    python -m app.cli.seed_catalog
    python -m app.cli.seed_catalog --names "Espresso,Macchiato"
    python -m app.cli.seed_catalog --list

Reseeding deletes every coffee first. Without --names the configured
SEED_COFFEES list is used.
"""
import asyncio
import argparse
import sys
from typing import List, Optional

from app.config import settings
from app.db.connection import init_db, close_db, get_unit_of_work
from app.domain.entities import Coffee, StoreUnavailableError
from app.services.seed_loader import reseed_catalog


def print_catalog(coffees: List[Coffee]):
    print()
    print("=" * 70)
    print(f"☕ {len(coffees)} coffee(s) in catalog")
    print("=" * 70)
    for coffee in coffees:
        print(f"  • {coffee.id}  {coffee.name}")
    print()


async def run(names: Optional[List[str]], list_only: bool, database_url: Optional[str] = None) -> int:
    """Returns a process exit code"""
    try:
        await init_db(database_url)

        if not list_only:
            await reseed_catalog(names if names is not None else settings.seed_coffees)
            print("✅ Catalog reseeded")

        async with get_unit_of_work() as uow:
            coffees = await uow.coffees.list_all()
        print_catalog(coffees)
        return 0

    except StoreUnavailableError as e:
        print(f"❌ Error: {e}")
        return 1
    finally:
        await close_db()


def parse_names(raw: Optional[str]) -> Optional[List[str]]:
    if raw is None:
        return None
    return [name.strip() for name in raw.split(",") if name.strip()]


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description='Reseed or list the coffee catalog',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Reseed with the configured SEED_COFFEES list
  %(prog)s

  # Reseed with a custom list
  %(prog)s --names "Espresso,Macchiato"

  # Only print the current catalog
  %(prog)s --list
        """
    )

    parser.add_argument(
        '--names',
        help='Comma-separated coffee names (default: SEED_COFFEES)'
    )

    parser.add_argument(
        '--list',
        dest='list_only',
        action='store_true',
        help='Print the catalog without reseeding'
    )

    parser.add_argument(
        '--database-url',
        help='Override DATABASE_URL'
    )

    args = parser.parse_args(argv)

    if args.list_only and args.names:
        parser.error("--list cannot be combined with --names")

    return asyncio.run(run(
        names=parse_names(args.names),
        list_only=args.list_only,
        database_url=args.database_url,
    ))


if __name__ == '__main__':
    sys.exit(main())
