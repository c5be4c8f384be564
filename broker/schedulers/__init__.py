from broker.schedulers.base import BaseScheduler, Assignment, ScheduleResult
from broker.schedulers.matrix import CompletionTimeMatrix, validate_inputs
from broker.schedulers.round_robin import RoundRobinScheduler
from broker.schedulers.suffrage import SuffrageScheduler, SuffrageRecord, RoundDecision, select_round

__all__ = [
    "BaseScheduler", "Assignment", "ScheduleResult",
    "CompletionTimeMatrix", "validate_inputs",
    "RoundRobinScheduler",
    "SuffrageScheduler", "SuffrageRecord", "RoundDecision", "select_round",
]
