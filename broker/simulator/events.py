"""Event types for the dispatch replay."""

from enum import Enum
from dataclasses import dataclass, field
from typing import Optional


class EventType(str, Enum):
    """Types of events the dispatch simulator processes."""
    TASK_START = "task_start"
    TASK_COMPLETION = "task_completion"


@dataclass(order=True)
class Event:
    """
    A single simulation event, ordered by time then sequence for heap ordering.
    Fields with compare=False are excluded from ordering (only time + sequence matter).
    """
    time: float
    sequence: int
    event_type: EventType = field(compare=False)
    task_id: Optional[int] = field(default=None, compare=False)
    resource_id: Optional[int] = field(default=None, compare=False)

    def __repr__(self) -> str:
        parts = [f"Event(t={self.time:.2f}, type={self.event_type.value}"]
        if self.task_id is not None:
            parts.append(f", task={self.task_id}")
        if self.resource_id is not None:
            parts.append(f", resource={self.resource_id}")
        parts.append(")")
        return "".join(parts)
