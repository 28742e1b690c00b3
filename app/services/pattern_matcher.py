"""
Pattern Matcher Service - Classifies issue records against a fixed catalog of failure patterns
"""
import re
from typing import Dict, List

from app.models import IssueRecord, PatternDefinition, PatternMatch


class PatternMatcher:
    """
    Evaluates every catalog pattern against a record's title, tags and messages.
    The catalog is a static table; adding a pattern means adding an entry here.
    """

    PATTERN_CATALOG = [
        # Critical crash patterns
        {
            'key': 'hardCrash',
            'pattern': r'\b(crash|crashed|crashes|crashing|app (closes|closed|shuts down|force close))\b',
            'severity': 'critical',
            'description': 'App completely crashes or force closes',
            'label': 'Hard Crashes',
        },
        {
            'key': 'suddenExit',
            'pattern': r'\b(suddenly (stops|exits|quits)|app disappears|unexpected(ly)? (close|exit))\b',
            'severity': 'critical',
            'description': 'App exits without warning',
            'label': 'Sudden Exit',
        },

        # Freeze/stuck patterns
        {
            'key': 'freeze',
            'pattern': r'\b(freeze|frozen|freezes|freezing|not responding|unresponsive)\b',
            'severity': 'high',
            'description': 'App becomes unresponsive',
            'label': 'App Freeze',
        },
        {
            'key': 'rewardStuck',
            'pattern': r"\b(reward.*stuck|can't claim|reward.*freeze|reward.*not working)\b",
            'severity': 'high',
            'description': 'Reward screen or claiming mechanism stuck',
            'label': 'Reward Stuck',
        },
        {
            'key': 'loadingStuck',
            'pattern': r"\b(loading (stuck|forever|infinite)|won't load|stuck.*loading)\b",
            'severity': 'medium',
            'description': 'Loading screens that never complete',
            'label': 'Loading Stuck',
        },

        # Progress/data issues
        {
            'key': 'progressLost',
            'pattern': r'\b(progress.*lost|reset.*progress|back to zero|lost.*items|bag.*zero)\b',
            'severity': 'high',
            'description': 'User progress or items lost/reset',
            'label': 'Progress Lost',
        },

        # UI/interaction issues
        {
            'key': 'uiStuck',
            'pattern': r'\b(stuck|hanging|hangs|tap.*not.*work|button.*not.*work)\b',
            'severity': 'medium',
            'description': 'UI elements not responding to interaction',
            'label': 'UI Stuck',
        },

        # Performance issues
        {
            'key': 'performanceLag',
            'pattern': r'\b(lag|lagging|slow|sluggish|choppy|stuttering|fps)\b',
            'severity': 'low',
            'description': 'Performance and responsiveness issues',
            'label': 'Performance Lag',
        },

        # Visual issues
        {
            'key': 'blackScreen',
            'pattern': r'\b(black screen|blank screen|white screen|screen.*blank)\b',
            'severity': 'medium',
            'description': 'Display issues and blank screens',
            'label': 'Black Screen',
        },
    ]

    # Patterns called out in the spike table as data-loss or crash family
    CRITICAL_FAMILY = ('hardCrash', 'suddenExit', 'progressLost')

    def __init__(self):
        # Compile patterns once; text is case-folded before matching.
        # Word boundaries are ASCII only, so an accented letter next to a keyword is a boundary.
        self.definitions = [
            PatternDefinition(
                key=info['key'],
                regex=re.compile(info['pattern'], re.ASCII),
                severity=info['severity'],
                description=info['description'],
                label=info['label'],
            )
            for info in self.PATTERN_CATALOG
        ]
        self._by_key = {d.key: d for d in self.definitions}

    @staticmethod
    def build_text(record: IssueRecord) -> str:
        """Concatenate title, tags and messages in that order, lowercased"""
        title = (record.title or '').lower()
        tags = (record.tags or '').lower()
        messages = (record.messages or '').lower()
        return f"{title} {tags} {messages}"

    def match(self, record: IssueRecord) -> Dict[str, PatternMatch]:
        """Evaluate every catalog pattern, returning an entry per pattern (matched or not)"""
        text = self.build_text(record)
        return {
            d.key: PatternMatch(matched=d.matches(text), severity=d.severity, description=d.description)
            for d in self.definitions
        }

    @staticmethod
    def matched_keys(match_set: Dict[str, PatternMatch]) -> List[str]:
        return [key for key, result in match_set.items() if result.matched]

    def format_pattern_name(self, key: str) -> str:
        """Human-readable name of a pattern key"""
        definition = self._by_key.get(key)
        if definition:
            return definition.label
        return key[:1].upper() + key[1:]

    def catalog_as_dicts(self) -> List[Dict]:
        return [d.to_dict() for d in self.definitions]
