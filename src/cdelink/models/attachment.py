"""Project indicator ORM model: a catalog item attached to a project."""

import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import (
    Float,
    ForeignKey,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from cdelink.constants import AttachmentStatus
from cdelink.models.base import Base
from cdelink.models.catalog import CatalogItem


class ProjectAttachment(Base):
    __tablename__ = "project_indicators"

    project_indicator_id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    project_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("projects.id", ondelete="CASCADE")
    )
    item_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("indicator_library.item_id")
    )

    baseline: Mapped[float | None] = mapped_column(Float, nullable=True)
    target: Mapped[float | None] = mapped_column(Float, nullable=True)
    current_value: Mapped[float | None] = mapped_column(
        Float, nullable=True
    )

    status: Mapped[str] = mapped_column(
        String(20), default=AttachmentStatus.ACTIVE
    )
    responsible_role: Mapped[str | None] = mapped_column(
        String(200), nullable=True
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        server_default=func.now(),
    )

    __table_args__ = (
        UniqueConstraint(
            "project_id", "item_id", name="uq_project_indicator"
        ),
    )

    def to_dict(
        self, item: CatalogItem | None = None
    ) -> dict[str, Any]:
        data: dict[str, Any] = {
            "project_indicator_id": self.project_indicator_id,
            "project_id": self.project_id,
            "item_id": self.item_id,
            "baseline": self.baseline,
            "target": self.target,
            "current_value": self.current_value,
            "status": self.status,
            "responsible_role": self.responsible_role,
            "notes": self.notes,
        }
        if item is not None:
            data["indicator"] = {
                "code": item.code,
                "name": item.name,
                "domain": item.domain,
                "definition": item.definition,
                "unit": item.unit,
            }
        return data
