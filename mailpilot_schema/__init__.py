"""Shared MailPilot data model."""

from .message import Category, ClassifiedMessage, ParsedMessage
from .task import Task, TaskStage

__all__ = [
    "Category",
    "ClassifiedMessage",
    "ParsedMessage",
    "Task",
    "TaskStage",
]
