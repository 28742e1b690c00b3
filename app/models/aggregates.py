"""
Aggregate models - running rollups built while folding issue records
"""
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Set

SEVERITY_LEVELS = ('critical', 'high', 'medium', 'low')

# Bucket key for missing version / date / OS version / country values
UNKNOWN = 'Unknown'


def tally(counts=None) -> Dict[str, int]:
    """Counter map where a missing key reads as 0"""
    return defaultdict(int, counts or {})


def empty_severity_tally() -> Dict[str, int]:
    return tally({level: 0 for level in SEVERITY_LEVELS})


def _add_counts(target: Dict[str, int], source: Dict[str, int]):
    for key, count in source.items():
        target[key] += count


@dataclass
class VersionAggregate:
    """Rollup for one application version"""
    count: int = 0
    patterns: Dict[str, int] = field(default_factory=tally)
    os_versions: Set[str] = field(default_factory=set)
    countries: Set[str] = field(default_factory=set)
    tag_breakdown: Dict[str, int] = field(default_factory=tally)
    dates: List[str] = field(default_factory=list)
    severity_count: Dict[str, int] = field(default_factory=empty_severity_tally)

    def __post_init__(self):
        self.patterns = tally(self.patterns)
        self.tag_breakdown = tally(self.tag_breakdown)
        self.severity_count = tally({**empty_severity_tally(), **self.severity_count})

    def merge(self, other: 'VersionAggregate'):
        self.count += other.count
        _add_counts(self.patterns, other.patterns)
        self.os_versions |= other.os_versions
        self.countries |= other.countries
        _add_counts(self.tag_breakdown, other.tag_breakdown)
        self.dates.extend(other.dates)
        _add_counts(self.severity_count, other.severity_count)

    def to_dict(self):
        return {
            'count': self.count,
            'patterns': dict(self.patterns),
            'os_versions': sorted(self.os_versions),
            'countries': sorted(self.countries),
            'tag_breakdown': dict(self.tag_breakdown),
            'dates': list(self.dates),
            'severity_count': dict(self.severity_count),
        }


@dataclass
class DailyAggregate:
    """Rollup for one creation date"""
    total: int = 0
    versions: Dict[str, int] = field(default_factory=tally)
    patterns: Dict[str, int] = field(default_factory=tally)
    severity_count: Dict[str, int] = field(default_factory=empty_severity_tally)

    def __post_init__(self):
        self.versions = tally(self.versions)
        self.patterns = tally(self.patterns)
        self.severity_count = tally({**empty_severity_tally(), **self.severity_count})

    def merge(self, other: 'DailyAggregate'):
        self.total += other.total
        _add_counts(self.versions, other.versions)
        _add_counts(self.patterns, other.patterns)
        _add_counts(self.severity_count, other.severity_count)

    def to_dict(self):
        return {
            'total': self.total,
            'versions': dict(self.versions),
            'patterns': dict(self.patterns),
            'severity_count': dict(self.severity_count),
        }


@dataclass
class PatternAggregate:
    """Global rollup for one catalog pattern that matched at least once"""
    severity: str
    description: str
    total: int = 0
    versions: Dict[str, int] = field(default_factory=tally)
    version_set: Set[str] = field(default_factory=set)

    def __post_init__(self):
        self.versions = tally(self.versions)

    @property
    def version_span(self) -> int:
        return len(self.versions)

    def merge(self, other: 'PatternAggregate'):
        self.total += other.total
        _add_counts(self.versions, other.versions)
        self.version_set |= other.version_set

    def to_dict(self):
        return {
            'total': self.total,
            'severity': self.severity,
            'description': self.description,
            'versions': dict(self.versions),
            'version_set': sorted(self.version_set),
        }


@dataclass
class TagAggregate:
    """Global rollup for one tag string"""
    count: int = 0
    versions: Set[str] = field(default_factory=set)

    def merge(self, other: 'TagAggregate'):
        self.count += other.count
        self.versions |= other.versions

    def to_dict(self):
        return {
            'count': self.count,
            'versions': sorted(self.versions),
        }


@dataclass
class Aggregates:
    """
    The four rollup collections of one analysis run.
    Owned by a single Aggregator; downstream stages only read it.
    """
    versions: Dict[str, VersionAggregate] = field(default_factory=dict)
    days: Dict[str, DailyAggregate] = field(default_factory=dict)
    patterns: Dict[str, PatternAggregate] = field(default_factory=dict)
    tags: Dict[str, TagAggregate] = field(default_factory=dict)
    total: int = 0

    def version(self, key: str) -> VersionAggregate:
        if key not in self.versions:
            self.versions[key] = VersionAggregate()
        return self.versions[key]

    def day(self, key: str) -> DailyAggregate:
        if key not in self.days:
            self.days[key] = DailyAggregate()
        return self.days[key]

    def pattern(self, key: str, severity: str, description: str) -> PatternAggregate:
        if key not in self.patterns:
            self.patterns[key] = PatternAggregate(severity=severity, description=description)
        return self.patterns[key]

    def tag(self, key: str) -> TagAggregate:
        if key not in self.tags:
            self.tags[key] = TagAggregate()
        return self.tags[key]

    def merge(self, other: 'Aggregates') -> 'Aggregates':
        """
        Fold another shard's rollups into this one.
        Counts are added and sets unioned, never overwritten.
        """
        for key, agg in other.versions.items():
            self.version(key).merge(agg)
        for key, agg in other.days.items():
            self.day(key).merge(agg)
        for key, agg in other.patterns.items():
            self.pattern(key, agg.severity, agg.description).merge(agg)
        for key, agg in other.tags.items():
            self.tag(key).merge(agg)
        self.total += other.total
        return self

    def to_dict(self):
        return {
            'total_issues': self.total,
            'version_groups': {k: v.to_dict() for k, v in self.versions.items()},
            'daily_trends': {k: v.to_dict() for k, v in self.days.items()},
            'pattern_analysis': {k: v.to_dict() for k, v in self.patterns.items()},
            'tag_patterns': {k: v.to_dict() for k, v in self.tags.items()},
        }
