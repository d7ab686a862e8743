"""Data models for git activity metrics and the blocks they describe."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..core.timeutils import ensure_utc


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys, matching the on-disk documents."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict:
        """JSON-ready dict using the on-disk key names."""
        return self.model_dump(mode="json", by_alias=True)


class RepoMetrics(CamelModel):
    """Commit/line/file activity for one repository, or the totals across several.

    ``estimated`` is set when line counts were extrapolated from a sample of
    commits (GitHub repositories with many commits) rather than counted
    exactly.
    """
    commits: int = 0
    lines_added: int = 0
    lines_removed: int = 0
    files_changed: int = 0
    test_files_changed: int = 0
    doc_files_changed: int = 0
    avg_commits_per_day: float = 0.0
    first_commit_times: List[datetime] = Field(default_factory=list)
    estimated: bool = False

    @field_validator("first_commit_times")
    @classmethod
    def normalize_timestamps(cls, v: List[datetime]) -> List[datetime]:
        return [ensure_utc(ts) for ts in v]


class DateRange(CamelModel):
    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def normalize_bounds(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class GitMetrics(CamelModel):
    """Per-block metrics document; the unit stored in the metrics cache."""
    block_id: str
    computed_at: datetime
    date_range: DateRange
    repositories: Dict[str, RepoMetrics] = Field(default_factory=dict)
    totals: RepoMetrics = Field(default_factory=RepoMetrics)


class Block(CamelModel):
    """A time-bounded period under one experimental condition.

    Only the fields needed to derive a metrics window are modelled; the rest
    of the block document is ignored.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str
    start_date: datetime
    end_date: Optional[datetime] = None
    expected_duration: int = 14

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_dates(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v) if v is not None else None

    @property
    def is_active(self) -> bool:
        return self.end_date is None
