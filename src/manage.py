"""Storefront database management CLI.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
    python src/manage.py seed       # Load the sample catalogue into an empty store
"""

import argparse
import sys


def _initialized_domain():
    from storefront.domain import storefront
    from storefront.utils.db import configure_storage

    backend = configure_storage(storefront)
    print(f"Initializing storefront domain ({backend})...")
    storefront.init()
    return storefront


def setup_database():
    """Create the storefront database schema."""
    from storefront.utils.db import setup_db

    domain = _initialized_domain()
    print("Creating storefront database schema...")
    setup_db(domain)
    print("Done.")


def drop_database():
    """Drop the storefront database schema."""
    from storefront.utils.db import drop_db

    domain = _initialized_domain()
    print("Dropping storefront database schema...")
    drop_db(domain)
    print("Done.")


def seed_catalogue():
    """Load the sample products when the catalogue is empty."""
    from storefront.utils.db import setup_db

    domain = _initialized_domain()
    setup_db(domain)
    with domain.domain_context():
        from storefront.product.seed import seed_sample_products

        added = seed_sample_products()
    print(f"Added {added} sample products.")


def main():
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("seed", help="Load the sample catalogue")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed":
        seed_catalogue()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
