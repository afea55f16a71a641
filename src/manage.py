"""AgriStore management CLI.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
    python src/manage.py seed       # Load default discount codes (and demo products)
"""

import argparse
import sys


def _domain():
    from agristore.domain import agristore

    agristore.init()
    return agristore


def setup_database():
    from agristore.utils.db import setup_db

    print("Initializing agristore domain...")
    domain = _domain()
    print("Creating database schema...")
    providers = setup_db(domain)
    print(f"  Schema ready for: {', '.join(providers) or 'no SQL providers configured'}.")
    print("Done.")


def drop_database():
    from agristore.utils.db import drop_db

    print("Initializing agristore domain...")
    domain = _domain()
    print("Dropping database schema...")
    providers = drop_db(domain)
    print(f"  Schema dropped for: {', '.join(providers) or 'no SQL providers configured'}.")
    print("Done.")


def seed(with_products=False):
    from agristore.catalog.seed import seed_demo_products, seed_discount_codes

    domain = _domain()
    with domain.domain_context():
        created = seed_discount_codes()
        print(f"Created {created} discount code(s).")
        if with_products:
            product_ids = seed_demo_products()
            print(f"Created {len(product_ids)} demo product(s).")
    print("Done.")


def main(argv=None):
    from agristore.utils.logging import configure_logging

    parser = argparse.ArgumentParser(description="AgriStore management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    seed_parser = subparsers.add_parser("seed", help="Load default catalogue data")
    seed_parser.add_argument(
        "--with-products",
        action="store_true",
        help="Also add the demo products",
    )

    args = parser.parse_args(argv)
    configure_logging()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed":
        seed(with_products=args.with_products)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
