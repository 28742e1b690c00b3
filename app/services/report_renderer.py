"""
Report Renderer Service - Serializes rollups and findings into a self-contained HTML report
"""
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from flask import has_app_context, render_template

from app.models import Aggregates
from app.services.insight_generator import InsightGenerator
from app.services.pattern_matcher import PatternMatcher

logger = logging.getLogger(__name__)


class ReportRenderer:
    """
    Prepares read-only views of an analysis run for the report template
    and Chart.js, and writes the finished document.
    """

    TOP_PATTERNS = 8
    TOP_VERSION_CARDS = 6
    SPIKE_TABLE_ROWS = 15
    PATTERNS_PER_VERSION = 2
    OS_VERSIONS_SHOWN = 3
    COUNTRIES_SHOWN = 4

    def __init__(self, matcher: Optional[PatternMatcher] = None, platform_label: str = 'iOS'):
        self.matcher = matcher or PatternMatcher()
        self.platform_label = platform_label
        self.insight_generator = InsightGenerator(platform_label)

    @staticmethod
    def _ranked(mapping: Dict[str, int], limit: Optional[int] = None) -> List[Dict]:
        ranked = sorted(mapping.items(), key=lambda kv: (-kv[1], kv[0]))
        if limit is not None:
            ranked = ranked[:limit]
        return [{'key': key, 'count': count} for key, count in ranked]

    def build_document(self, aggregates: Aggregates, insights: List[str]) -> Dict:
        """JSON-serializable output document; set-valued fields become sorted lists"""
        document = aggregates.to_dict()
        document['insights'] = list(insights)
        document['platform'] = self.platform_label
        document['generated_at'] = datetime.now().isoformat(timespec='seconds')
        return document

    def version_rows(self, aggregates: Aggregates) -> List[Dict]:
        """Version aggregates sorted by count descending, with derived display fields"""
        rows = []
        ranked = sorted(aggregates.versions.items(), key=lambda kv: (-kv[1].count, kv[0]))
        for version, data in ranked:
            os_versions = sorted(data.os_versions)
            countries = sorted(data.countries)
            critical_rate = (data.severity_count['critical'] / data.count * 100) if data.count else 0.0
            rows.append({
                'version': version,
                'count': data.count,
                'patterns': dict(data.patterns),
                'tag_breakdown': dict(data.tag_breakdown),
                'severity_count': dict(data.severity_count),
                'critical_rate': round(critical_rate, 1),
                'os_versions': os_versions,
                'countries': countries,
                'top_patterns': [
                    {'name': self.matcher.format_pattern_name(p['key']), 'count': p['count']}
                    for p in self._ranked(data.patterns, self.PATTERNS_PER_VERSION)
                ],
                'top_tags': self._ranked(data.tag_breakdown, 3),
                'os_versions_shown': os_versions[:self.OS_VERSIONS_SHOWN],
                'more_os_versions': len(os_versions) > self.OS_VERSIONS_SHOWN,
                'countries_shown': countries[:self.COUNTRIES_SHOWN],
                'more_countries': len(countries) > self.COUNTRIES_SHOWN,
            })
        return rows

    def daily_rows(self, aggregates: Aggregates) -> List[Dict]:
        """Daily aggregates sorted by date ascending"""
        avg_daily = self.insight_generator.daily_average(aggregates)
        threshold = avg_daily * self.insight_generator.SPIKE_MULTIPLIER
        rows = []
        for date in sorted(aggregates.days):
            data = aggregates.days[date]
            top_version = self._ranked(data.versions, 1)
            critical_patterns = {k: v for k, v in data.patterns.items()
                                 if k in self.matcher.CRITICAL_FAMILY}
            rows.append({
                'date': date,
                'total': data.total,
                'versions': dict(data.versions),
                'patterns': dict(data.patterns),
                'severity_count': dict(data.severity_count),
                'change_percent': round((data.total / avg_daily - 1) * 100) if avg_daily else 0,
                'is_spike': data.total > threshold,
                'top_version': top_version[0] if top_version else None,
                'critical_patterns': [
                    {'name': self.matcher.format_pattern_name(p['key']), 'count': p['count']}
                    for p in self._ranked(critical_patterns, 2)
                ],
            })
        return rows

    def spike_table(self, daily_rows: List[Dict]) -> List[Dict]:
        """Top days by volume descending; ties keep date order"""
        return sorted(daily_rows, key=lambda row: -row['total'])[:self.SPIKE_TABLE_ROWS]

    def pattern_cards(self, aggregates: Aggregates) -> List[Dict]:
        """Pattern aggregates sorted by total descending"""
        cards = []
        ranked = sorted(aggregates.patterns.items(), key=lambda kv: (-kv[1].total, kv[0]))
        for key, data in ranked[:self.TOP_PATTERNS]:
            top_version = self._ranked(data.versions, 1)
            cards.append({
                'key': key,
                'name': self.matcher.format_pattern_name(key),
                'severity': data.severity,
                'description': data.description,
                'total': data.total,
                'top_version': top_version[0] if top_version else None,
                'version_span': data.version_span,
            })
        return cards

    def build_context(self, aggregates: Aggregates, insights: List[str]) -> Dict:
        """Everything the report template needs, without re-querying the rollups"""
        version_rows = self.version_rows(aggregates)
        daily_rows = self.daily_rows(aggregates)
        return {
            'platform_label': self.platform_label,
            'total_issues': aggregates.total,
            'version_count': len(aggregates.versions),
            'pattern_type_count': len(aggregates.patterns),
            'days_analyzed': len(aggregates.days),
            'daily_average': round(self.insight_generator.daily_average(aggregates), 2),
            'spike_multiplier': self.insight_generator.SPIKE_MULTIPLIER,
            'insights': insights,
            'pattern_cards': self.pattern_cards(aggregates),
            'version_rows': version_rows,
            'version_cards': version_rows[:self.TOP_VERSION_CARDS],
            'daily_rows': daily_rows,
            'spike_rows': self.spike_table(daily_rows),
            'pattern_labels': {d.key: d.label for d in self.matcher.definitions},
            'generated_at': datetime.now().strftime('%Y-%m-%d %H:%M'),
        }

    def render(self, aggregates: Aggregates, insights: List[str]) -> str:
        """Render the interactive report, creating an app context when none is active"""
        context = self.build_context(aggregates, insights)
        if has_app_context():
            return render_template('report.html', **context)

        from app import create_app
        with create_app('default').app_context():
            return render_template('report.html', **context)

    def write(self, output_path, html: str) -> Path:
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(html, encoding='utf-8')
        logger.info(f"Enhanced interactive report generated: {path}")
        return path
