"""Bulk attachment of catalog indicators to a project.

One call makes at most two store round-trips, strictly in order:

1. a single read of the item ids already attached to the project;
2. a single bulk insert of the ids that are not.

A uniqueness conflict on the insert means a concurrent caller
attached one of the same ids between steps 1 and 2. The whole batch
is then counted as skipped rather than retried per id; the racing
rows already satisfy the one-attachment-per-pair rule. Any other
store failure is recorded in the result and raised as
AttachmentError carrying that result.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from cdelink.constants import AttachmentStatus, AttachOutcome
from cdelink.models.attachment import ProjectAttachment
from cdelink.models.catalog import CatalogItem
from cdelink.repositories.protocols import AttachmentRepository
from cdelink.resilience.errors import (
    AttachmentError,
    StoreError,
    UniqueConstraintError,
    ValidationError,
)
from cdelink.schemas import AttachmentDefaults

logger = logging.getLogger(__name__)


@dataclass
class AttachmentResult:
    """Outcome of one bulk attach call.

    ``inserted + skipped`` never exceeds the number of distinct ids
    requested; it is equal unless ``outcome`` is FAILED.
    """

    inserted: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)
    outcome: AttachOutcome = AttachOutcome.NOTHING_TO_INSERT

    def summary(self) -> str:
        """One-line confirmation, e.g. 'Added 2 indicators, skipped 1 already added'."""
        noun = "indicator" if self.inserted == 1 else "indicators"
        text = f"Added {self.inserted} {noun}"
        if self.skipped > 0:
            text += f", skipped {self.skipped} already added"
        return text

    def to_dict(self) -> dict[str, Any]:
        return {
            "inserted": self.inserted,
            "skipped": self.skipped,
            "errors": list(self.errors),
            "outcome": self.outcome.value,
            "summary": self.summary(),
        }


def _distinct_ids(item_ids: Iterable[str]) -> list[str]:
    ids = list(dict.fromkeys(item_ids))
    if not ids:
        raise ValidationError("at least one catalog item id is required")
    if any(not i for i in ids):
        raise ValidationError("catalog item ids must be non-empty")
    return ids


class AttachmentService:
    def __init__(self, repo: AttachmentRepository) -> None:
        self._repo = repo

    async def attach(
        self,
        project_id: str,
        item_ids: Iterable[str],
        defaults: AttachmentDefaults | None = None,
    ) -> AttachmentResult:
        """Attach ``item_ids`` to ``project_id``, skipping those already attached.

        Raises:
            ValidationError: empty project id or id set; no store call made.
            AttachmentError: unexpected store failure. ``exc.result``
                holds the counts and the recorded error message.
        """
        if not project_id:
            raise ValidationError("project_id is required")
        requested = _distinct_ids(item_ids)
        result = AttachmentResult()

        try:
            existing = await self._repo.existing_item_ids(project_id)
        except StoreError as exc:
            raise self._fail(project_id, result, exc) from exc

        to_insert = [i for i in requested if i not in existing]
        result.skipped = len(requested) - len(to_insert)

        if not to_insert:
            logger.info(
                "event=attach_noop project_id=%s skipped=%d",
                project_id,
                result.skipped,
            )
            return result

        defaults = defaults or AttachmentDefaults()
        records = [
            self._build(project_id, item_id, defaults)
            for item_id in to_insert
        ]

        try:
            stored = await self._repo.bulk_insert(records)
        except UniqueConstraintError:
            logger.warning(
                "event=attach_conflict project_id=%s batch=%d"
                " action=count_batch_as_skipped",
                project_id,
                len(to_insert),
            )
            result.skipped += len(to_insert)
            result.outcome = AttachOutcome.CONFLICT_ABSORBED
            return result
        except StoreError as exc:
            raise self._fail(project_id, result, exc) from exc

        result.inserted = len(stored)
        result.outcome = AttachOutcome.INSERTED
        logger.info(
            "event=attach_done project_id=%s inserted=%d skipped=%d",
            project_id,
            result.inserted,
            result.skipped,
        )
        return result

    async def list_for_project(
        self, project_id: str
    ) -> list[tuple[ProjectAttachment, CatalogItem]]:
        """Active attachments with their catalog item, by domain then code."""
        return await self._repo.list_active(project_id)

    @staticmethod
    def _build(
        project_id: str, item_id: str, defaults: AttachmentDefaults
    ) -> ProjectAttachment:
        return ProjectAttachment(
            project_id=project_id,
            item_id=item_id,
            baseline=defaults.baseline,
            target=defaults.target,
            responsible_role=defaults.responsible_role,
            notes=defaults.notes,
            status=AttachmentStatus.ACTIVE,
            current_value=None,
        )

    @staticmethod
    def _fail(
        project_id: str, result: AttachmentResult, exc: StoreError
    ) -> AttachmentError:
        message = str(exc) or "Unknown error"
        result.errors.append(message)
        result.outcome = AttachOutcome.FAILED
        logger.error(
            "event=attach_failed project_id=%s error=%s",
            project_id,
            message,
        )
        return AttachmentError(message, result, exc.error_class)
