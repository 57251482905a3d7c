"""Indicator library ORM model: the shared catalog of reusable indicators."""

import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import Boolean, Float, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from cdelink.models.base import Base


class CatalogItem(Base):
    __tablename__ = "indicator_library"

    item_id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    code: Mapped[str] = mapped_column(String(50), unique=True)
    name: Mapped[str] = mapped_column(String(300))
    domain: Mapped[str] = mapped_column(String(50), index=True)
    maturity_level: Mapped[str] = mapped_column(String(50), index=True)

    # Definition
    definition: Mapped[str] = mapped_column(Text)
    rationale: Mapped[str | None] = mapped_column(Text, nullable=True)
    limitations: Mapped[str | None] = mapped_column(Text, nullable=True)
    interpretation_notes: Mapped[str | None] = mapped_column(
        Text, nullable=True
    )

    # Measurement and collection
    unit: Mapped[str] = mapped_column(String(50), default="number")
    aggregation_method: Mapped[str] = mapped_column(
        String(50), default="sum"
    )
    data_source: Mapped[str] = mapped_column(String(50), default="manual")
    collection_frequency: Mapped[str | None] = mapped_column(
        String(50), nullable=True
    )

    default_baseline: Mapped[float | None] = mapped_column(
        Float, nullable=True
    )
    default_target: Mapped[float | None] = mapped_column(
        Float, nullable=True
    )

    is_system: Mapped[bool] = mapped_column(Boolean, default=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        server_default=func.now(),
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "item_id": self.item_id,
            "code": self.code,
            "name": self.name,
            "domain": self.domain,
            "maturity_level": self.maturity_level,
            "definition": self.definition,
            "rationale": self.rationale,
            "limitations": self.limitations,
            "interpretation_notes": self.interpretation_notes,
            "unit": self.unit,
            "aggregation_method": self.aggregation_method,
            "data_source": self.data_source,
            "collection_frequency": self.collection_frequency,
            "default_baseline": self.default_baseline,
            "default_target": self.default_target,
            "is_system": self.is_system,
            "is_active": self.is_active,
        }
