# customer_update/cli/db_cli.py

from __future__ import annotations

import argparse
import logging

from customer_update.config import get_settings
from customer_update.db.base import Base
from customer_update.db import models  # noqa: F401 - import models so Base.metadata is populated
from customer_update.db.session import create_engine_from_settings, create_session_factory
from customer_update.logging_config import configure_logging
from customer_update.services.demo_data import seed_demo_customers


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Customer Update database CLI: create tables and load demo customers."
    )
    parser.add_argument(
        "--database-url",
        type=str,
        default=None,
        help="Optional override for the database URL. "
             "Defaults to DATABASE_URL from settings.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("init-db", help="Create the customers table if it does not exist.")
    subparsers.add_parser("seed", help="Insert demo customers into an empty customers table.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    settings = get_settings()
    if args.database_url:
        settings = settings.model_copy(update={"database_url": args.database_url})

    configure_logging(settings)
    logger = logging.getLogger(__name__)

    engine = create_engine_from_settings(settings)
    try:
        logger.info("Running %s against %s", args.command, engine.url.render_as_string(hide_password=True))
        Base.metadata.create_all(bind=engine)

        if args.command == "seed":
            session_factory = create_session_factory(engine)
            with session_factory() as db:
                inserted = seed_demo_customers(db)
            print(f"Seed complete: {inserted} customers inserted")
        else:
            print("Tables created")
    finally:
        engine.dispose()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
