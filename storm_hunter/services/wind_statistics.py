"""
Mergeable running statistics for wind speed.

`WindStatistics` is an immutable value: every shard builds its own state
with `update`, and the partial states are combined with `merge` once all
shards are done. `merge` is associative and commutative (up to floating
point rounding) and the empty state is its identity, so a thread pool, a
process pool or a plain loop all produce the same result.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import reduce
from typing import Iterable

from storm_hunter.core.errors import UndefinedStatisticsError
from storm_hunter.services.sources.isd_lite import ObservationRecord


@dataclass(frozen=True)
class WindStatistics:
    count: int = 0
    mean: float = math.nan
    m2: float = 0.0  # sum of squared deviations from the mean

    def update(self, value: float) -> "WindStatistics":
        """Welford's online update with one sample."""
        count = self.count + 1
        if count == 1:
            return WindStatistics(1, value, 0.0)
        delta = value - self.mean
        mean = self.mean + delta / count
        return WindStatistics(count, mean, self.m2 + delta * (value - mean))

    @classmethod
    def from_values(cls, values: Iterable[float]) -> "WindStatistics":
        return reduce(cls.update, values, cls())

    def merge(self, other: "WindStatistics") -> "WindStatistics":
        """
        Combine two partial states into the state of their union.

        The mean update picks the form that loses the least precision
        when one side is much larger than the other.
        """
        if other.count == 0:
            return self
        if self.count == 0:
            return other
        count = self.count + other.count
        delta = other.mean - self.mean
        if other.count * 10 < self.count:
            mean = self.mean + delta * other.count / count
        elif self.count * 10 < other.count:
            mean = other.mean - delta * self.count / count
        else:
            mean = (self.mean * self.count + other.mean * other.count) / count
        m2 = self.m2 + other.m2 + delta * delta * self.count * other.count / count
        return WindStatistics(count, mean, m2)

    @classmethod
    def combine(cls, states: Iterable["WindStatistics"]) -> "WindStatistics":
        return reduce(cls.merge, states, cls())

    def sample_variance(self) -> float:
        if self.count < 2:
            raise UndefinedStatisticsError(
                f"sample variance needs at least 2 samples, got {self.count}"
            )
        return self.m2 / (self.count - 1)

    def sample_stdev(self) -> float:
        return math.sqrt(self.sample_variance())


def wind_speeds(records: Iterable[ObservationRecord]) -> Iterable[float]:
    """Present wind speeds only; missing values never reach the accumulator."""
    return (record.wind_speed for record in records if record.wind_speed is not None)


def shard_statistics(records: Iterable[ObservationRecord]) -> WindStatistics:
    return WindStatistics.from_values(wind_speeds(records))

