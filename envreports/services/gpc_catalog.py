"""GPC reference catalog and priority tiers.

The catalog is static configuration: the ordered list of GPC reference
numbers a country's reports should cover, and a priority tier for each
code used to decide which gaps to fill first.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping


class Priority(str, enum.Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


PRIORITY_ORDER = (Priority.HIGH, Priority.MEDIUM, Priority.LOW)

GPC_REFERENCE_NUMBERS = (
    "I.1.1", "I.1.2", "I.1.3",
    "I.2.1", "I.2.2", "I.2.3",
    "I.3.1", "I.3.2", "I.3.3",
    "I.4.1", "I.4.2", "I.4.3", "I.4.4",
    "I.5.1", "I.5.2",
    "I.6.1", "I.6.2",
    "I.7.1",
    "I.8.1",
    "II.1.1", "II.1.2", "II.1.3",
    "II.2.1", "II.2.2", "II.2.3",
    "II.3.1", "II.3.2", "II.3.3",
    "II.4.1", "II.4.2",
    "II.5.1",
    "III.1.1", "III.1.2",
    "III.2.1", "III.2.2",
    "III.3.1", "III.3.2",
    "III.4.1", "III.4.2", "III.4.3",
)

# Covers more codes than the reference list; extra entries are harmless.
GPC_PRIORITIES: Mapping[str, Priority] = MappingProxyType({
    "I.1.1": Priority.HIGH,
    "I.1.2": Priority.HIGH,
    "I.1.3": Priority.LOW,
    "I.2.1": Priority.MEDIUM,
    "I.2.2": Priority.MEDIUM,
    "I.2.3": Priority.LOW,
    "I.3.1": Priority.MEDIUM,
    "I.3.2": Priority.MEDIUM,
    "I.3.3": Priority.LOW,
    "I.4.1": Priority.MEDIUM,
    "I.4.2": Priority.MEDIUM,
    "I.4.3": Priority.LOW,
    "I.4.4": Priority.LOW,
    "I.5.1": Priority.MEDIUM,
    "I.5.2": Priority.MEDIUM,
    "I.5.3": Priority.LOW,
    "I.6.1": Priority.LOW,
    "I.6.2": Priority.LOW,
    "I.6.3": Priority.LOW,
    "I.7.1": Priority.MEDIUM,
    "I.8.1": Priority.MEDIUM,
    "II.1.1": Priority.HIGH,
    "II.1.2": Priority.LOW,
    "II.1.3": Priority.LOW,
    "II.2.1": Priority.MEDIUM,
    "II.2.2": Priority.LOW,
    "II.2.3": Priority.LOW,
    "II.3.1": Priority.LOW,
    "II.3.2": Priority.LOW,
    "II.3.3": Priority.LOW,
    "II.4.1": Priority.LOW,
    "II.4.2": Priority.LOW,
    "II.4.3": Priority.LOW,
    "II.5.1": Priority.LOW,
    "II.5.2": Priority.LOW,
    "III.1.1": Priority.HIGH,
    "III.1.2": Priority.HIGH,
    "III.1.3": Priority.LOW,
    "III.2.1": Priority.MEDIUM,
    "III.2.2": Priority.MEDIUM,
    "III.2.3": Priority.LOW,
    "III.3.1": Priority.MEDIUM,
    "III.3.2": Priority.MEDIUM,
    "III.3.3": Priority.LOW,
    "III.4.1": Priority.HIGH,
    "III.4.2": Priority.HIGH,
    "III.4.3": Priority.LOW,
    "IV.1": Priority.LOW,
    "IV.2": Priority.LOW,
    "V.1": Priority.MEDIUM,
    "V.2": Priority.MEDIUM,
    "V.3": Priority.LOW,
    "VI.1": Priority.LOW,
})


@dataclass(frozen=True)
class GPCCatalog:
    """Ordered reference codes with a priority lookup.

    Codes missing from ``priorities`` are treated as low priority, so a
    reference list that drifts ahead of the priority table never breaks
    a scan.
    """

    codes: tuple[str, ...]
    priorities: Mapping[str, Priority] = field(default_factory=dict)
    default_priority: Priority = Priority.LOW

    def __post_init__(self) -> None:
        object.__setattr__(self, "codes", tuple(self.codes))
        object.__setattr__(
            self,
            "priorities",
            MappingProxyType({code: Priority(tier) for code, tier in self.priorities.items()}),
        )

    def __len__(self) -> int:
        return len(self.codes)

    def __contains__(self, code: object) -> bool:
        return code in self._code_set

    @property
    def _code_set(self) -> frozenset[str]:
        return frozenset(self.codes)

    def priority_of(self, code: str) -> Priority:
        return self.priorities.get(code, self.default_priority)

    def group_by_priority(self, codes: Iterable[str]) -> dict[Priority, list[str]]:
        """Bucket ``codes`` by tier, keeping their input order within each bucket."""
        groups: dict[Priority, list[str]] = {tier: [] for tier in PRIORITY_ORDER}
        for code in codes:
            groups[self.priority_of(code)].append(code)
        return groups

    def priority_stats(self, codes: Iterable[str]) -> dict[str, int]:
        codes = list(codes)
        groups = self.group_by_priority(codes)
        stats = {tier.value: len(groups[tier]) for tier in PRIORITY_ORDER}
        stats["total"] = len(codes)
        return stats

    def sort_by_priority(self, codes: Iterable[str]) -> list[str]:
        """Return ``codes`` ordered high, medium, low; stable within a tier."""
        rank = {tier: i for i, tier in enumerate(PRIORITY_ORDER)}
        return sorted(codes, key=lambda code: rank[self.priority_of(code)])


DEFAULT_CATALOG = GPCCatalog(codes=GPC_REFERENCE_NUMBERS, priorities=GPC_PRIORITIES)
