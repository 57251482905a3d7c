"""Evidence ORM models: evidence items and their polymorphic links.

An EvidenceLink row carries the evidence id plus exactly one of four
entity columns. Which column holds the entity id is decided by
``entity_column()``, a closed match over EntityKind.
"""

import uuid
from datetime import UTC, date, datetime
from typing import Any

from sqlalchemy import (
    CheckConstraint,
    Date,
    ForeignKey,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import InstrumentedAttribute, Mapped, mapped_column

from cdelink.constants import EntityKind, EvidenceType
from cdelink.models.base import Base


class EvidenceItem(Base):
    __tablename__ = "evidence_items"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    project_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("projects.id", ondelete="CASCADE")
    )
    type: Mapped[str] = mapped_column(
        String(50), default=EvidenceType.SCREENSHOT
    )
    title: Mapped[str] = mapped_column(String(300))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    source_url: Mapped[str | None] = mapped_column(
        String(1000), nullable=True
    )
    evidence_date: Mapped[date] = mapped_column(
        Date, default=lambda: datetime.now(UTC).date()
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        server_default=func.now(),
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "project_id": self.project_id,
            "type": self.type,
            "title": self.title,
            "description": self.description,
            "source_url": self.source_url,
            "evidence_date": self.evidence_date.isoformat(),
            "notes": self.notes,
        }


_ENTITY_COLUMNS = (
    "activity_id",
    "indicator_id",
    "asset_id",
    "publication_id",
)

# Exactly one entity column is set per row
_ONE_ENTITY_SQL = (
    " + ".join(
        f"(CASE WHEN {col} IS NULL THEN 0 ELSE 1 END)"
        for col in _ENTITY_COLUMNS
    )
    + " = 1"
)


class EvidenceLink(Base):
    __tablename__ = "evidence_links"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    evidence_item_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("evidence_items.id", ondelete="CASCADE"),
        index=True,
    )
    activity_id: Mapped[str | None] = mapped_column(
        String(36), nullable=True, index=True
    )
    indicator_id: Mapped[str | None] = mapped_column(
        String(36), nullable=True, index=True
    )
    asset_id: Mapped[str | None] = mapped_column(
        String(36), nullable=True, index=True
    )
    publication_id: Mapped[str | None] = mapped_column(
        String(36), nullable=True, index=True
    )
    linked_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        server_default=func.now(),
    )

    __table_args__ = (
        UniqueConstraint(
            "evidence_item_id", "activity_id", name="uq_link_activity"
        ),
        UniqueConstraint(
            "evidence_item_id", "indicator_id", name="uq_link_indicator"
        ),
        UniqueConstraint(
            "evidence_item_id", "asset_id", name="uq_link_asset"
        ),
        UniqueConstraint(
            "evidence_item_id",
            "publication_id",
            name="uq_link_publication",
        ),
        CheckConstraint(_ONE_ENTITY_SQL, name="ck_link_one_entity"),
    )

    @classmethod
    def for_entity(
        cls, kind: EntityKind, entity_id: str, evidence_id: str
    ) -> "EvidenceLink":
        """Build a link row with the entity id in the kind's column."""
        link = cls(evidence_item_id=evidence_id)
        match kind:
            case EntityKind.ACTIVITY:
                link.activity_id = entity_id
            case EntityKind.INDICATOR:
                link.indicator_id = entity_id
            case EntityKind.ASSET:
                link.asset_id = entity_id
            case EntityKind.PUBLICATION:
                link.publication_id = entity_id
        return link

    @property
    def entity(self) -> tuple[EntityKind, str]:
        for kind in EntityKind:
            value = getattr(self, entity_column(kind).key)
            if value is not None:
                return kind, value
        raise ValueError(f"evidence link {self.id} has no entity")

    def to_dict(self) -> dict[str, Any]:
        kind, entity_id = self.entity
        return {
            "id": self.id,
            "evidence_item_id": self.evidence_item_id,
            "entity_kind": kind.value,
            "entity_id": entity_id,
            "linked_at": self.linked_at.isoformat(),
        }


def entity_column(
    kind: EntityKind,
) -> InstrumentedAttribute[str | None]:
    """Column holding the entity id for ``kind``."""
    match kind:
        case EntityKind.ACTIVITY:
            return EvidenceLink.activity_id
        case EntityKind.INDICATOR:
            return EvidenceLink.indicator_id
        case EntityKind.ASSET:
            return EvidenceLink.asset_id
        case EntityKind.PUBLICATION:
            return EvidenceLink.publication_id
