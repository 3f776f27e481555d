"""Seed the configured database with mock catalog products.

Usage: python seed_mock_products.py [--reset]
"""

import argparse
import logging

from catalog_api.database import Base, SessionLocal, engine
from catalog_api.seed import seed_products

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
)


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--reset", action="store_true", help="Delete the mock products before inserting")
    args = parser.parse_args()

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_products(db, reset=args.reset)
    finally:
        db.close()


if __name__ == "__main__":
    main()
