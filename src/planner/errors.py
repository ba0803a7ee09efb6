class PlannerError(Exception):
    """Base class for planner programming errors."""


class ProtectedFieldError(PlannerError, ValueError):
    """A CRUD edit tried to write a field owned by the scheduling engine."""

    def __init__(self, fields: set[str]):
        self.fields = fields
        super().__init__(f"Fields cannot be edited directly: {', '.join(sorted(fields))}")


class DuplicateEntityError(PlannerError, ValueError):
    """An entity with the same id is already registered."""


class InvariantViolation(AssertionError):
    """The planner state broke one of its consistency rules."""

    def __init__(self, problems: list[str]):
        self.problems = problems
        super().__init__("Planner invariants violated:\n" + "\n".join(problems))


class MealSlotConflictError(PlannerError, ValueError):
    """An edit would leave a non-restaurant place in a lunch or dinner slot."""
