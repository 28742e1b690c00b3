"""
Data models for Issue Pattern Analyzer
"""
from dataclasses import dataclass, field
from typing import Dict, Pattern

# Import aggregate models
from app.models.aggregates import (
    SEVERITY_LEVELS, UNKNOWN, empty_severity_tally,
    VersionAggregate, DailyAggregate, PatternAggregate, TagAggregate, Aggregates
)


@dataclass(frozen=True)
class IssueRecord:
    """One retained row of the support-issue export"""
    platform: str
    version: str
    created_date: str
    title: str
    messages: str
    tags: str
    os_version: str
    country: str
    raw: Dict[str, str] = field(default_factory=dict, compare=False, repr=False)


@dataclass(frozen=True)
class PatternDefinition:
    """One entry of the fixed pattern catalog"""
    key: str
    regex: Pattern
    severity: str
    description: str
    label: str

    def matches(self, text: str) -> bool:
        return self.regex.search(text) is not None

    def to_dict(self):
        return {
            'key': self.key,
            'pattern': self.regex.pattern,
            'severity': self.severity,
            'description': self.description,
            'label': self.label,
        }


@dataclass(frozen=True)
class PatternMatch:
    """Result of evaluating one pattern against one record"""
    matched: bool
    severity: str
    description: str


__all__ = [
    'IssueRecord', 'PatternDefinition', 'PatternMatch',
    'SEVERITY_LEVELS', 'UNKNOWN', 'empty_severity_tally',
    'VersionAggregate', 'DailyAggregate', 'PatternAggregate', 'TagAggregate', 'Aggregates',
]
