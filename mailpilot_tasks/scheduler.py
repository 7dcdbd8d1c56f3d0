"""StageScheduler: persists stage list changes through a TaskStore."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Protocol

import structlog

from mailpilot_schema import TaskStage

from .exceptions import StageNotFoundError
from .stages import apply_stage_order, create_default_stages

logger = structlog.get_logger()


class TaskStore(Protocol):
    """Persistence collaborator holding each task's stage list."""

    async def load_stages(self, task_id: int) -> list[TaskStage]: ...

    async def save_stages(self, task_id: int, stages: list[TaskStage]) -> None: ...


class StageScheduler:
    """Every write goes through :func:`apply_stage_order`, so stored
    orders are always contiguous and stages are never deleted here
    unless the caller leaves them out of a resubmitted list.
    """

    def __init__(self, store: TaskStore) -> None:
        self._store = store

    async def initialize(self, task_id: int) -> list[TaskStage]:
        stages = create_default_stages()
        await self._store.save_stages(task_id, stages)
        logger.info("task_stages_initialized", task_id=task_id, stages=len(stages))
        return stages

    async def update(self, task_id: int, incoming: Sequence[TaskStage]) -> list[TaskStage]:
        existing = await self._store.load_stages(task_id)
        merged = apply_stage_order(existing, incoming)
        await self._store.save_stages(task_id, merged)
        logger.info(
            "task_stages_updated",
            task_id=task_id,
            before=len(existing),
            after=len(merged),
        )
        return merged

    async def complete_stage(
        self,
        task_id: int,
        name: str,
        *,
        email_id: int | None = None,
        completed_at: datetime | None = None,
    ) -> list[TaskStage]:
        """Mark the stage called *name* complete and persist the list."""
        existing = await self._store.load_stages(task_id)
        if not any(stage.name == name for stage in existing):
            raise StageNotFoundError(task_id, name)

        when = completed_at or datetime.now(UTC)
        incoming = [
            stage.model_copy(
                update={
                    "completed": True,
                    "completed_at": when,
                    "email_id": email_id if email_id is not None else stage.email_id,
                }
            )
            if stage.name == name
            else stage
            for stage in existing
        ]
        return await self.update(task_id, incoming)
