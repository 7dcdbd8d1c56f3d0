"""Task schema: delegated work items and their ordered stages."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class TaskStage(BaseModel):
    """One named step in a task's completion pipeline.

    ``name`` identifies the stage within its task when stage lists are
    merged.  ``order`` may be ``None`` on incoming stages; the stage
    scheduler fills it in.
    """

    name: str = Field(description="Stage label, unique within a task")
    completed: bool = Field(default=False, description="Whether the stage is done")
    completed_at: datetime | None = Field(
        default=None,
        description="When the stage was completed (UTC)",
    )
    email_id: int | None = Field(
        default=None,
        description="Email that completed or evidenced this stage",
    )
    order: int | None = Field(default=None, description="Zero-based position in the task")


class Task(BaseModel):
    """A delegated task and its stage list."""

    id: int = Field(description="Task identifier assigned by persistence")
    title: str = Field(default="", description="Short description of the work")
    stages: list[TaskStage] = Field(
        default_factory=list,
        description="Stages in storage order",
    )
