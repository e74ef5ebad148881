"""
Duplicate ingredient consolidation.

Ingredients that share a display name are merged into the one with the lowest
id: every recipe line, price and cooking-session line pointing at a redundant
ingredient is repointed at the master, then the redundant rows are
soft-deleted. A run covers all duplicate groups in a single transaction, so
either every group is merged or nothing changes.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from app.services.ingredient_store import (
    REFERENCING_TABLES,
    DuplicateGroup,
    IngredientStore,
    StoreError,
)

logger = logging.getLogger(__name__)


@dataclass
class DuplicateReport:
    """Result of a read-only duplicate scan."""

    groups: List[DuplicateGroup] = field(default_factory=list)

    @property
    def group_count(self) -> int:
        return len(self.groups)


@dataclass
class MergedGroup:
    name: str
    master_id: int
    redundant_ids: List[int]
    references_updated: int = 0


@dataclass
class ConsolidationResult:
    """What a successful consolidation run changed."""

    merged_groups: List[MergedGroup] = field(default_factory=list)

    @property
    def total_merged(self) -> int:
        return sum(len(group.redundant_ids) for group in self.merged_groups)


class DuplicateConsolidator:
    """Finds and merges ingredients that share a name."""

    def __init__(self, store: IngredientStore):
        self.store = store

    def _scan(self) -> List[DuplicateGroup]:
        try:
            return self.store.find_ingredients_grouped_by_name()
        except StoreError as e:
            raise ScanFailedError(str(e)) from e

    def check_only(self) -> DuplicateReport:
        """
        Report duplicate groups without changing anything.

        Raises:
            ScanFailedError: if the store cannot be queried
        """
        report = DuplicateReport(groups=self._scan())

        if report.group_count:
            logger.warning("Found %d groups of duplicate ingredients", report.group_count)
            for group in report.groups:
                logger.info("  - '%s': %d duplicates (ids %s)", group.name, group.count, group.ids)
        else:
            logger.info("No duplicate ingredients found")

        return report

    def consolidate(self) -> ConsolidationResult:
        """
        Merge every duplicate group in one transaction.

        Any failure after the transaction has begun, including unexpected
        exceptions, rolls back all groups before propagating.

        Returns:
            ConsolidationResult describing the merged groups

        Raises:
            ScanFailedError: scan failed, nothing was attempted
            ReferenceUpdateError: repointing a referencing table failed
            DeleteFailedError: retiring redundant ingredients failed
            ConsolidationError: begin or commit failed
        """
        logger.info("Starting search for duplicate ingredients...")
        groups = self._scan()
        logger.info("Found %d duplicate groups", len(groups))

        result = ConsolidationResult()
        if not groups:
            return result

        try:
            self.store.begin()
        except StoreError as e:
            raise ConsolidationError(str(e), step="begin") from e

        try:
            for group in groups:
                merged = self._merge_group(group.name)
                if merged is not None:
                    result.merged_groups.append(merged)

            try:
                self.store.commit()
            except StoreError as e:
                raise ConsolidationError(str(e), step="commit") from e
        except BaseException:
            logger.error("Rolling back duplicate ingredient merge")
            try:
                self.store.rollback()
            except Exception:
                logger.exception("Rollback of duplicate ingredient merge failed")
            raise

        logger.info("Successfully merged %d duplicate ingredients", result.total_merged)
        return result

    def _merge_group(self, name: str) -> Optional[MergedGroup]:
        try:
            ingredients = self.store.find_ingredients_by_name(name)
        except StoreError as e:
            raise ConsolidationError(str(e), step="find", group=name) from e

        if len(ingredients) <= 1:
            return None

        master = min(ingredients, key=lambda ingredient: ingredient.id)
        redundant_ids = sorted(i.id for i in ingredients if i.id != master.id)
        logger.info("Merging %d duplicates for ingredient '%s'", len(redundant_ids), name)

        merged = MergedGroup(name=name, master_id=master.id, redundant_ids=redundant_ids)
        for table in REFERENCING_TABLES:
            try:
                merged.references_updated += self.store.update_foreign_key(
                    table, redundant_ids, master.id
                )
            except StoreError as e:
                raise ReferenceUpdateError(str(e), group=name, table=table) from e

        try:
            self.store.delete_ingredients(redundant_ids)
        except StoreError as e:
            raise DeleteFailedError(str(e), group=name) from e

        logger.info(
            "Merged %d duplicates for '%s' into master ID: %d",
            len(redundant_ids),
            name,
            master.id,
        )
        return merged


# =============================================================================
# CUSTOM EXCEPTIONS
# =============================================================================


class ConsolidationError(Exception):
    """A consolidation run failed; `step` and `group` say where."""

    def __init__(self, message: str, step: str, group: Optional[str] = None):
        self.step = step
        self.group = group
        where = f"{step} for '{group}'" if group is not None else step
        super().__init__(f"{where}: {message}")


class ScanFailedError(ConsolidationError):
    """Duplicate scan failed before any change was attempted."""

    def __init__(self, message: str):
        super().__init__(message, step="scan")


class ReferenceUpdateError(ConsolidationError):
    """Repointing one referencing table at the master ingredient failed."""

    def __init__(self, message: str, group: str, table: str):
        self.table = table
        super().__init__(message, step=f"update {table}", group=group)


class DeleteFailedError(ConsolidationError):
    """Soft-deleting the redundant ingredients of a group failed."""

    def __init__(self, message: str, group: str):
        super().__init__(message, step="delete", group=group)
