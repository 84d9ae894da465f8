"""POI discovery scheduling by progress threshold."""

from typing import Iterable

from .models import CandidatePOI, DiscoveredPOI


class POIDiscoveryScheduler:
    """Fires each candidate POI once, the first time progress reaches its threshold.

    Candidates are sorted by threshold up front and consumed with a cursor,
    so repeated evaluations at the same or lower progress fire nothing and a
    single large jump fires every crossed candidate in ascending order.
    """

    def __init__(self, candidates: Iterable[CandidatePOI]):
        ordered = sorted(candidates, key=lambda c: (c.threshold, c.id))
        self.candidates: list[CandidatePOI] = []
        seen_ids: set[str] = set()
        seen_names: set[str] = set()
        for candidate in ordered:
            if candidate.id in seen_ids or candidate.name in seen_names:
                continue
            seen_ids.add(candidate.id)
            seen_names.add(candidate.name)
            self.candidates.append(candidate)
        self._cursor = 0

    @property
    def pending(self) -> int:
        return len(self.candidates) - self._cursor

    def evaluate(self, progress: float, now: float) -> list[DiscoveredPOI]:
        """Discoveries for the observed progress, stamped with `now`"""
        fired = []
        while self._cursor < len(self.candidates):
            candidate = self.candidates[self._cursor]
            if candidate.threshold > progress:
                break
            fired.append(DiscoveredPOI(
                id=candidate.id,
                name=candidate.name,
                category=candidate.category,
                coordinate=candidate.coordinate,
                discovered_at=now,
            ))
            self._cursor += 1
        return fired
