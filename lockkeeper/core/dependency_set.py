"""Order-preserving, deduplicating accumulator of dependency records."""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from lockkeeper.models import DependencyRecord

RecordKey = Tuple[str, Optional[str]]


class DependencySet:
    """Collects :class:`DependencyRecord` objects keyed by name and version.

    Adding a record with a new ``(name, resolved_version)`` appends it.
    Adding one with a known key keeps the existing position and appends any
    requirement entries the stored record does not already carry.

    Example::

        >>> deps = DependencySet()
        >>> deps.add(DependencyRecord(name="a", resolved_version="1.0.0"))
        >>> deps += other_set
        >>> [d.name for d in deps]
        ['a', ...]
    """

    def __init__(self, records: Iterable[DependencyRecord] = ()) -> None:
        self._records: Dict[RecordKey, DependencyRecord] = {}
        for record in records:
            self.add(record)

    def add(self, record: DependencyRecord) -> None:
        existing = self._records.get(record.key)
        if existing is None:
            self._records[record.key] = record
            return

        new_requirements = [
            req for req in record.requirements if req not in existing.requirements
        ]
        if new_requirements:
            self._records[record.key] = replace(
                existing,
                requirements=existing.requirements + new_requirements,
            )

    def update(self, other: Iterable[DependencyRecord]) -> None:
        for record in other:
            self.add(record)

    def __iadd__(self, other: Iterable[DependencyRecord]) -> "DependencySet":
        self.update(other)
        return self

    @property
    def records(self) -> List[DependencyRecord]:
        """Records in first-seen order."""
        return list(self._records.values())

    def get(self, name: str, resolved_version: Optional[str] = None) -> Optional[DependencyRecord]:
        return self._records.get((name, resolved_version))

    def __contains__(self, record: object) -> bool:
        return isinstance(record, DependencyRecord) and record.key in self._records

    def __iter__(self) -> Iterator[DependencyRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"DependencySet(records={len(self)})"
