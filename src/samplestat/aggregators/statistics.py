"""Running min/max/mean over the numeric fields of ``Person`` records."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import NamedTuple

from ..records import Person


class FieldSummary(NamedTuple):
    minimum: int
    maximum: int
    mean: float


class StatisticsSummary(NamedTuple):
    age: FieldSummary
    height: FieldSummary
    count: int

    def to_dict(self) -> dict[str, object]:
        return {
            "age": self.age._asdict(),
            "height": self.height._asdict(),
            "count": self.count,
        }


@dataclass
class FieldStatistics:
    """Min, max and sum of one integer field. Starts at (+inf, -inf, 0)."""

    minimum: float = math.inf
    maximum: float = -math.inf
    total: int = 0

    def add(self, value: int) -> None:
        self.minimum = min(self.minimum, value)
        self.maximum = max(self.maximum, value)
        self.total += value

    def merge(self, other: "FieldStatistics") -> None:
        self.minimum = min(self.minimum, other.minimum)
        self.maximum = max(self.maximum, other.maximum)
        self.total += other.total

    def summary(self, count: int) -> FieldSummary:
        return FieldSummary(int(self.minimum), int(self.maximum), self.total / count)


@dataclass
class PersonStatistics:
    """Fold ``Person`` records into per-field running statistics.

    Usage::

        stats = PersonStatistics()
        for person in reader:
            stats.add(person)

        summary = stats.summary()
        # StatisticsSummary(age=FieldSummary(minimum=25, maximum=30, mean=27.5), ...)
    """

    age: FieldStatistics = field(default_factory=FieldStatistics)
    height: FieldStatistics = field(default_factory=FieldStatistics)
    count: int = 0

    def add(self, person: Person) -> None:
        self.age.add(person.age)
        self.height.add(person.height)
        self.count += 1

    def merge(self, other: "PersonStatistics") -> None:
        self.age.merge(other.age)
        self.height.merge(other.height)
        self.count += other.count

    def summary(self) -> StatisticsSummary | None:
        """Min, max and mean per field, or ``None`` if nothing was added."""
        if self.count == 0:
            return None
        return StatisticsSummary(
            age=self.age.summary(self.count),
            height=self.height.summary(self.count),
            count=self.count,
        )

    def __len__(self) -> int:
        return self.count


def update(stats: PersonStatistics, person: Person) -> PersonStatistics:
    stats.add(person)
    return stats


def summarize(stats: PersonStatistics) -> StatisticsSummary | None:
    return stats.summary()
