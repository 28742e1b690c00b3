"""
Aggregator Service - Folds classified issue records into version, daily, pattern and tag rollups
"""
import json
import logging
import re
from typing import Dict, Iterable, List, Optional

from app.models import Aggregates, IssueRecord, PatternMatch, UNKNOWN

logger = logging.getLogger(__name__)

EMPTY_TAG_LIST = '[]'


def bucket_key(value: Optional[str]) -> str:
    """Grouping key for a possibly missing field"""
    if value is None:
        return UNKNOWN
    value = value.strip()
    return value or UNKNOWN


def parse_tags(raw: Optional[str]) -> List[str]:
    """
    Decode the tag column.
    Newer exports hold a JSON array of strings, older ones a bare tag string,
    so a failed decode falls back to one literal tag.
    """
    raw = (raw or '').strip() or EMPTY_TAG_LIST
    try:
        decoded = json.loads(raw)
    except ValueError:
        decoded = None

    if isinstance(decoded, list):
        return [tag if isinstance(tag, str) else json.dumps(tag) for tag in decoded]

    simple_tag = re.sub(r'[\[\]"]', '', raw).strip()
    if simple_tag and simple_tag != EMPTY_TAG_LIST:
        return [simple_tag]
    return []


class Aggregator:
    """
    Owns the Aggregates of one analysis run and mutates them one record at a time.
    Totals do not depend on fold order; per-version date sequences keep input order.
    """

    def __init__(self, aggregates: Optional[Aggregates] = None):
        self.aggregates = aggregates if aggregates is not None else Aggregates()

    def fold(self, record: IssueRecord, match_set: Dict[str, PatternMatch]):
        """Add one record and its pattern matches to every rollup"""
        agg = self.aggregates
        app_version = bucket_key(record.version)
        created_date = bucket_key(record.created_date)

        version_group = agg.version(app_version)
        day = agg.day(created_date)

        for pattern_name, result in match_set.items():
            if not result.matched:
                continue
            version_group.patterns[pattern_name] += 1
            version_group.severity_count[result.severity] += 1
            day.patterns[pattern_name] += 1
            day.severity_count[result.severity] += 1

            pattern = agg.pattern(pattern_name, result.severity, result.description)
            pattern.total += 1
            pattern.versions[app_version] += 1
            pattern.version_set.add(app_version)

        version_group.count += 1
        version_group.os_versions.add(bucket_key(record.os_version))
        version_group.countries.add(bucket_key(record.country))
        version_group.dates.append(created_date)

        day.total += 1
        day.versions[app_version] += 1

        for tag in parse_tags(record.tags):
            version_group.tag_breakdown[tag] += 1
            tag_group = agg.tag(tag)
            tag_group.count += 1
            tag_group.versions.add(app_version)

        agg.total += 1

    def fold_all(self, records: Iterable[IssueRecord], matcher) -> Aggregates:
        """Classify and fold a whole record sequence in input order"""
        logger.info("Enhanced analysis with pattern detection...")
        for record in records:
            self.fold(record, matcher.match(record))
        logger.info(f"Enhanced analysis complete! Detected {len(self.aggregates.patterns)} pattern types")
        return self.aggregates
