"""Polymorphic evidence links, one row per (evidence, entity kind, entity id)."""

from __future__ import annotations

import logging

from cdelink.constants import EntityKind, LinkOutcome
from cdelink.models.evidence import EvidenceLink
from cdelink.repositories.protocols import EvidenceLinkRepository
from cdelink.resilience.errors import UniqueConstraintError, ValidationError

logger = logging.getLogger(__name__)


def parse_entity_kind(value: str | EntityKind) -> EntityKind:
    """Resolve a kind string to the closed EntityKind set."""
    try:
        return EntityKind(value)
    except ValueError:
        allowed = ", ".join(k.value for k in EntityKind)
        raise ValidationError(
            f"unknown entity kind {value!r}; expected one of: {allowed}"
        ) from None


def _check_key(entity_id: str, evidence_id: str) -> None:
    if not entity_id:
        raise ValidationError("entity_id is required")
    if not evidence_id:
        raise ValidationError("evidence_id is required")


class EvidenceLinkService:
    """Link and unlink evidence to activities, indicators, assets, publications.

    Neither operation pre-reads the store. Callers refresh their own
    view of linked evidence after a successful call.
    """

    def __init__(self, repo: EvidenceLinkRepository) -> None:
        self._repo = repo

    async def link(
        self,
        entity_kind: str | EntityKind,
        entity_id: str,
        evidence_id: str,
    ) -> LinkOutcome:
        kind = parse_entity_kind(entity_kind)
        _check_key(entity_id, evidence_id)
        try:
            await self._repo.insert(
                EvidenceLink.for_entity(kind, entity_id, evidence_id)
            )
        except UniqueConstraintError:
            logger.info(
                "event=link_exists kind=%s entity_id=%s evidence_id=%s",
                kind,
                entity_id,
                evidence_id,
            )
            return LinkOutcome.ALREADY_LINKED
        logger.info(
            "event=link_created kind=%s entity_id=%s evidence_id=%s",
            kind,
            entity_id,
            evidence_id,
        )
        return LinkOutcome.LINKED

    async def unlink(
        self,
        entity_kind: str | EntityKind,
        entity_id: str,
        evidence_id: str,
    ) -> bool:
        """Delete the link; True if a row was removed. Missing links are a no-op."""
        kind = parse_entity_kind(entity_kind)
        _check_key(entity_id, evidence_id)
        removed = await self._repo.delete(kind, entity_id, evidence_id)
        logger.info(
            "event=link_removed kind=%s entity_id=%s evidence_id=%s"
            " removed=%d",
            kind,
            entity_id,
            evidence_id,
            removed,
        )
        return removed > 0

    async def linked_evidence_ids(
        self, entity_kind: str | EntityKind, entity_id: str
    ) -> list[str]:
        kind = parse_entity_kind(entity_kind)
        if not entity_id:
            raise ValidationError("entity_id is required")
        return await self._repo.evidence_ids_for(kind, entity_id)
