"""Errors raised while validating scheduler input."""


class SchedulingError(ValueError):
    """Base class: the task/resource input cannot be scheduled."""


class InvalidResource(SchedulingError):
    """A resource has a non-positive speed or a duplicate id."""


class InvalidTask(SchedulingError):
    """A task has a negative length or a duplicate id."""


class Infeasible(SchedulingError):
    """The resource pool is empty, so no task can ever be placed."""
