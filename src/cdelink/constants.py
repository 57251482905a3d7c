"""Shared constants for cross-module values.

All magic strings and numbers that appear in 2+ files belong here.
StrEnum members are str-compatible, so downstream code (JSON, SQL,
query parameters) works unchanged.
"""

from __future__ import annotations

from enum import StrEnum

# ── String Enums ─────────────────────────────────────────


class IndicatorDomain(StrEnum):
    """Catalog classification tag."""

    COMMUNICATION = "communication"
    DISSEMINATION = "dissemination"
    EXPLOITATION = "exploitation"


class MaturityLevel(StrEnum):
    """Catalog maturity tier."""

    BASIC = "basic"
    ADVANCED = "advanced"
    EXPERT = "expert"


class AttachmentStatus(StrEnum):
    """Lifecycle status of a project indicator."""

    ACTIVE = "active"
    PAUSED = "paused"
    ARCHIVED = "archived"


class EntityKind(StrEnum):
    """Project entities that evidence can be linked to."""

    ACTIVITY = "activity"
    INDICATOR = "indicator"
    ASSET = "asset"
    PUBLICATION = "publication"


class EvidenceType(StrEnum):
    SCREENSHOT = "screenshot"
    PDF = "pdf"
    PHOTO = "photo"
    AGENDA = "agenda"
    ATTENDANCE = "attendance"
    ANALYTICS = "analytics"
    MEDIA = "media"
    CITATION = "citation"
    AGREEMENT = "agreement"


class AttachOutcome(StrEnum):
    """How a bulk attach call ended.

    FAILED is the only outcome that is also raised to the caller.
    """

    INSERTED = "inserted"
    NOTHING_TO_INSERT = "nothing_to_insert"
    CONFLICT_ABSORBED = "conflict_absorbed"
    FAILED = "failed"


class LinkOutcome(StrEnum):
    LINKED = "linked"
    ALREADY_LINKED = "already_linked"


# ── Catalog ──────────────────────────────────────────────

# Filter value meaning "no constraint" for domain/maturity selects
FILTER_ALL = "all"

# Window size used when an offset is given without a limit
DEFAULT_WINDOW_SIZE = 50

DOMAIN_LABELS: dict[str, str] = {
    FILTER_ALL: "All Domains",
    IndicatorDomain.COMMUNICATION: "Communication",
    IndicatorDomain.DISSEMINATION: "Dissemination",
    IndicatorDomain.EXPLOITATION: "Exploitation",
}

MATURITY_LABELS: dict[str, str] = {
    FILTER_ALL: "All Levels",
    MaturityLevel.BASIC: "Basic",
    MaturityLevel.ADVANCED: "Advanced",
    MaturityLevel.EXPERT: "Expert",
}

LIBRARY_ROUTE = "/library"

# ── Store ────────────────────────────────────────────────

# PostgreSQL SQLSTATE for unique_violation
PG_UNIQUE_VIOLATION = "23505"
SQLITE_UNIQUE_MARKER = "unique constraint failed"

# ── Logging ──────────────────────────────────────────────

ERROR_TRUNCATION_CHARS = 500
