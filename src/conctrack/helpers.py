from collections import defaultdict
from datetime import datetime
from typing import Iterable

from .types import DoseEvent

def split_doses_by_substance(doses: Iterable[DoseEvent]) -> dict[str, tuple[DoseEvent, ...]]:
    """
    Group dose events by substance, each group sorted by administration time.
    """
    buckets: dict[str, list[DoseEvent]] = defaultdict(list)
    for d in doses:
        buckets[d.substance].append(d)
    return {
        substance: tuple(sorted(ds, key=lambda x: (x.time, x.route)))
        for substance, ds in buckets.items()
    }

def hours_between(earlier: datetime, later: datetime) -> float:
    """Signed hours from `earlier` to `later`."""
    return (later - earlier).total_seconds() / 3600.0
