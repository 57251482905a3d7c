"""Domain input models shared by services, repositories and the API."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from cdelink.constants import FILTER_ALL, EvidenceType


def _constraint(value: str | None) -> str | None:
    if not value or value == FILTER_ALL:
        return None
    return value


class CatalogFilter(BaseModel):
    """Catalog query filter. Every field is optional.

    ``"all"`` for domain or maturity level means no constraint,
    the same as leaving the field out.
    """

    model_config = ConfigDict(frozen=True)

    domain: str | None = None
    maturity_level: str | None = None
    search: str | None = Field(default=None, max_length=200)
    limit: int | None = Field(default=None, ge=1)
    offset: int | None = Field(default=None, ge=0)

    @property
    def domain_constraint(self) -> str | None:
        return _constraint(self.domain)

    @property
    def maturity_constraint(self) -> str | None:
        return _constraint(self.maturity_level)

    @property
    def search_term(self) -> str | None:
        if self.search is None:
            return None
        return self.search.strip() or None

    def window(self, default_size: int) -> tuple[int, int | None]:
        """Return (offset, limit) to apply to the ordered result.

        A non-zero offset without a limit uses ``default_size``.
        """
        if self.offset:
            return self.offset, self.limit or default_size
        return 0, self.limit


class AttachmentDefaults(BaseModel):
    """Initial values copied onto every newly attached indicator."""

    baseline: float | None = None
    target: float | None = None
    responsible_role: str | None = Field(default=None, max_length=200)
    notes: str | None = None


class EvidenceCreate(BaseModel):
    type: EvidenceType = EvidenceType.SCREENSHOT
    title: str = Field(min_length=1, max_length=300)
    description: str | None = None
    source_url: str | None = Field(default=None, max_length=1000)
    evidence_date: date | None = None
    notes: str | None = None
