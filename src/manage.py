"""Storefront ordering management CLI.

Usage:
    python src/manage.py setup-db       # Create all tables
    python src/manage.py drop-db        # Drop all tables
    python src/manage.py seed-catalog   # Load demo products
"""

import argparse
import sys


def _ordering():
    from ordering.domain import ordering

    ordering.init()
    return ordering


def setup_database():
    from ordering.utils.db import setup_db

    domain = _ordering()
    print("Creating ordering database schema...")
    setup_db(domain)
    print("Done.")


def drop_database():
    from ordering.utils.db import drop_db

    domain = _ordering()
    print("Dropping ordering database schema...")
    drop_db(domain)
    print("Done.")


def seed_catalog():
    from ordering.catalog.seeding import seed_catalog as seed

    domain = _ordering()
    with domain.domain_context():
        added = seed()
    print(f"Added {added} product(s) to the catalog.")


def main():
    parser = argparse.ArgumentParser(description="Storefront ordering management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("seed-catalog", help="Register demo catalog products")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed-catalog":
        seed_catalog()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
