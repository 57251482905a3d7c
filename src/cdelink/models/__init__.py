"""SQLAlchemy ORM models."""

from cdelink.models.attachment import ProjectAttachment
from cdelink.models.base import Base
from cdelink.models.catalog import CatalogItem
from cdelink.models.evidence import EvidenceItem, EvidenceLink
from cdelink.models.project import Project

__all__ = [
    "Base",
    "CatalogItem",
    "EvidenceItem",
    "EvidenceLink",
    "Project",
    "ProjectAttachment",
]
