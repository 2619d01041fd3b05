"""Cache cleanup API schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from cachesweep.application.dtos.cleanup import CleanupRunResult
from cachesweep.domain.enums import TableKind


class TableCleanupResponse(BaseModel):
    """Rows deleted from one physical table."""

    data_type: str
    table: TableKind
    table_name: str
    deleted: int
    culprit_owners: list[str] = Field(
        default_factory=list, description="Unknown agent types whose records were deleted"
    )


class CleanupRunResponse(BaseModel):
    """Summary of one cache cleanup run."""

    started_at: datetime
    finished_at: datetime | None
    skipped: bool
    agent_type_count: int
    data_type_count: int
    total_deleted: int
    failures: int
    failed_data_types: list[str]
    tables: list[TableCleanupResponse]

    @classmethod
    def from_result(cls, result: CleanupRunResult) -> CleanupRunResponse:
        return cls(
            started_at=result.started_at,
            finished_at=result.finished_at,
            skipped=result.skipped,
            agent_type_count=result.agent_type_count,
            data_type_count=result.data_type_count,
            total_deleted=result.total_deleted,
            failures=result.failures,
            failed_data_types=list(result.failed_data_types),
            tables=[
                TableCleanupResponse(
                    data_type=t.data_type,
                    table=t.kind,
                    table_name=t.table_name,
                    deleted=t.deleted,
                    culprit_owners=sorted(t.culprit_owners),
                )
                for t in result.tables
            ],
        )
