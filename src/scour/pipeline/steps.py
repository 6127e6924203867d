"""Stage identifiers and the step records stages yield."""

from dataclasses import dataclass, field
from enum import Enum


class Stage(str, Enum):
    """Pipeline stages in execution order."""

    QUERIES = "queries"
    SEARCH = "search"
    EXTRACT = "extract"
    EXPORT = "export"


class Outcome(str, Enum):
    """What happened to one unit of work."""

    GENERATED = "generated"
    RETRIEVED = "retrieved"
    ADMITTED = "admitted"
    DISCARDED = "discarded"
    IRRELEVANT = "irrelevant"
    EMPTY = "empty"
    DUPLICATE = "duplicate"
    FAILED = "failed"
    EXPORTED = "exported"


@dataclass
class StageStep:
    """One persisted unit of work."""

    stage: Stage
    index: int
    outcome: Outcome
    item: str = ""
    added: int = 0
    message: str = ""


@dataclass
class StageResult:
    """Counters accumulated over a stage run."""

    stage: Stage
    steps: int = 0
    added: int = 0
    outcomes: dict[str, int] = field(default_factory=dict)

    def record(self, step: StageStep) -> None:
        self.steps += 1
        self.added += step.added
        key = step.outcome.value
        self.outcomes[key] = self.outcomes.get(key, 0) + 1

    def count(self, outcome: Outcome) -> int:
        return self.outcomes.get(outcome.value, 0)


__all__ = ["Stage", "Outcome", "StageStep", "StageResult"]
