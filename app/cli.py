"""CLI commands for Kitchen Ledger maintenance."""

import argparse
import logging
import sys

from sqlalchemy.orm import Session

from app.config import settings
from app.database import SessionLocal, init_db
from app.services.consolidation_service import ConsolidationError, DuplicateConsolidator
from app.services.ingredient_store import SqlAlchemyIngredientStore

logger = logging.getLogger("app.cli")


def _consolidator(db: Session) -> DuplicateConsolidator:
    store = SqlAlchemyIngredientStore(
        db, statement_timeout_ms=settings.consolidation_statement_timeout_ms
    )
    return DuplicateConsolidator(store)


def check_duplicates() -> int:
    """Log duplicate ingredient groups without changing anything. Returns the group count."""
    db: Session = SessionLocal()

    try:
        logger.info("Checking for duplicate ingredients...")
        try:
            report = _consolidator(db).check_only()
        except ConsolidationError as e:
            logger.error("Error while checking duplicates: %s", e)
            sys.exit(1)

        if report.group_count:
            logger.info("To merge duplicates run: kitchen-ledger merge-duplicates")
        return report.group_count

    finally:
        db.close()


def merge_duplicates() -> int:
    """Merge all duplicate ingredient groups in one transaction. Returns ingredients merged."""
    db: Session = SessionLocal()

    try:
        logger.info("Merging duplicate ingredients...")
        try:
            result = _consolidator(db).consolidate()
        except ConsolidationError as e:
            logger.error("Error while merging duplicates: %s", e)
            sys.exit(1)

        logger.info(
            "Duplicate merge complete: %d groups, %d ingredients merged",
            len(result.merged_groups),
            result.total_merged,
        )
        return result.total_merged

    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="Kitchen Ledger CLI")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("init-db", help="Create missing database tables")
    subparsers.add_parser(
        "check-duplicates", help="Report ingredients that share a name"
    )
    subparsers.add_parser(
        "merge-duplicates", help="Merge ingredients that share a name"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "init-db":
        init_db()
    elif args.command == "check-duplicates":
        check_duplicates()
    elif args.command == "merge-duplicates":
        merge_duplicates()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
