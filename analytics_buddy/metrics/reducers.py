"""
Metric Reducers

Accumulate classified records into a count. A reducer instance is
single-use: one per aggregation call.
"""

from abc import ABC, abstractmethod
from collections import Counter
from typing import Callable, Iterable, Optional, Set

from analytics_buddy.metrics.classifiers import Record, actor_id


class Reducer(ABC):
    """Base reducer: subclasses implement ``add`` and ``result``."""
    
    @abstractmethod
    def add(self, record: Record) -> None:
        """Accumulate one matching record."""
        pass
    
    @abstractmethod
    def result(self) -> int:
        """Final count."""
        pass
    
    def consume(self, records: Iterable[Record]) -> int:
        for record in records:
            self.add(record)
        return self.result()


class RecordCountReducer(Reducer):
    """Plain record count (distinct events)."""
    
    def __init__(self):
        self._count = 0
    
    def add(self, record: Record) -> None:
        self._count += 1
    
    def result(self) -> int:
        return self._count


class DistinctActorReducer(Reducer):
    """
    Distinct-actor count keyed by customer id.
    
    Records without an actor id are never counted.
    """
    
    def __init__(self, key: Callable[[Record], Optional[str]] = actor_id):
        self._key = key
        self.actors: Set[str] = set()
    
    def add(self, record: Record) -> None:
        actor = self._key(record)
        if actor:
            self.actors.add(actor)
    
    def result(self) -> int:
        return len(self.actors)


class RepeatActorReducer(Reducer):
    """Actors appearing on more than one record."""
    
    def __init__(self, key: Callable[[Record], Optional[str]] = actor_id):
        self._key = key
        self._counts: Counter = Counter()
    
    def add(self, record: Record) -> None:
        actor = self._key(record)
        if actor:
            self._counts[actor] += 1
    
    def result(self) -> int:
        return sum(1 for seen in self._counts.values() if seen > 1)

