"""
Insight Generator Service - Turns rollups into ranked plain English findings
"""
from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from app.models import Aggregates, empty_severity_tally


def _top(items, metric) -> Optional[Tuple]:
    """
    Highest-ranked (key, value) pair: metric descending, then key ascending.
    Returns None for an empty collection.
    """
    ranked = sorted(items, key=lambda kv: (-metric(kv[1]), kv[0]))
    return ranked[0] if ranked else None


class InsightGenerator:
    """
    Rule-based findings over a finished Aggregates context.
    Read only: never mutates the rollups it is given.
    """

    SPIKE_MULTIPLIER = 1.5
    CROSS_VERSION_MIN = 3
    DOMINANT_SHARE = 0.3

    def __init__(self, platform_label: str = 'iOS'):
        self.platform_label = platform_label

    # ------------------------------------------------------------------
    # Derived statistics
    # ------------------------------------------------------------------

    @staticmethod
    def daily_average(aggregates: Aggregates) -> float:
        if not aggregates.days:
            return 0.0
        return sum(d.total for d in aggregates.days.values()) / len(aggregates.days)

    def detect_spikes(self, aggregates: Aggregates) -> List[str]:
        """Dates (ascending) whose volume exceeds SPIKE_MULTIPLIER x the daily mean"""
        threshold = self.daily_average(aggregates) * self.SPIKE_MULTIPLIER
        return [date for date in sorted(aggregates.days)
                if aggregates.days[date].total > threshold]

    @staticmethod
    def severity_totals(aggregates: Aggregates) -> Dict[str, int]:
        totals = empty_severity_tally()
        for version in aggregates.versions.values():
            for severity, count in version.severity_count.items():
                totals[severity] += count
        return totals

    @staticmethod
    def os_version_weights(aggregates: Aggregates) -> Dict[str, int]:
        """OS version -> summed count of every app version it was seen with"""
        weights = defaultdict(int)
        for version in aggregates.versions.values():
            for os_version in version.os_versions:
                weights[os_version] += version.count
        return dict(weights)

    @staticmethod
    def _percent(part, whole) -> float:
        return (part / whole * 100) if whole else 0.0

    # ------------------------------------------------------------------
    # Findings
    # ------------------------------------------------------------------

    def summarize(self, aggregates: Aggregates) -> List[str]:
        """Ordered findings for the report. Empty when no records were retained."""
        total = aggregates.total
        if total == 0 or not aggregates.versions:
            return []

        insights = []

        top_version = _top(aggregates.versions.items(), lambda v: v.count)
        insights.append(
            f"**Version Analysis:** Version {top_version[0]} is responsible for "
            f"{self._percent(top_version[1].count, total):.1f}% of all {self.platform_label} issues "
            f"({top_version[1].count} out of {total}). "
            f"This suggests a significant regression in this version."
        )

        critical = [(k, p) for k, p in aggregates.patterns.items() if p.severity == 'critical']
        top_critical = _top(critical, lambda p: p.total)
        if top_critical:
            insights.append(
                f"**Critical Alert:** \"{top_critical[1].description}\" affects "
                f"{top_critical[1].version_span} versions with {top_critical[1].total} total cases. "
                f"This is a high-priority issue requiring immediate attention."
            )

        spikes = self.detect_spikes(aggregates)
        if spikes:
            avg_daily = self.daily_average(aggregates)
            biggest_spike = _top([(d, aggregates.days[d]) for d in spikes], lambda d: d.total)
            spike_volume = biggest_spike[1].total
            spike_increase = (spike_volume / avg_daily - 1) * 100
            insights.append(
                f"**Trend Alert:** {biggest_spike[0]} showed a {spike_increase:.0f}% spike in issues "
                f"({spike_volume} vs {avg_daily:.0f} average). "
                f"This suggests a significant incident or release impact."
            )

        severity_totals = self.severity_totals(aggregates)
        critical_count = severity_totals['critical']
        if critical_count > 0:
            insights.append(
                f"**Severity Distribution:** {self._percent(critical_count, total):.1f}% of issues are critical "
                f"({critical_count} cases), indicating severe stability problems that could drive user churn."
            )

        cross_version = [(k, p) for k, p in aggregates.patterns.items()
                         if p.version_span >= self.CROSS_VERSION_MIN]
        top_cross = _top(cross_version, lambda p: p.version_span)
        if top_cross:
            insights.append(
                f"**Cross-Version Issue:** \"{top_cross[1].description}\" appears across "
                f"{top_cross[1].version_span} different versions, "
                f"suggesting a fundamental design or architecture problem."
            )

        top_os = _top(self.os_version_weights(aggregates).items(), lambda weight: weight)
        if top_os:
            insights.append(
                f"**{self.platform_label} Compatibility:** {self.platform_label} {top_os[0]} accounts for "
                f"{self._percent(top_os[1], total):.1f}% of issues. "
                f"Consider focused testing and optimization for this {self.platform_label} version."
            )

        recommendations = self.recommendations(aggregates, top_version, critical_count, spikes)
        if recommendations:
            insights.append(f"**Recommendations:** {'. '.join(recommendations)}.")

        return insights

    def recommendations(self, aggregates: Aggregates, top_version, critical_count: int,
                        spikes: List[str]) -> List[str]:
        recommendations = []

        if top_version and top_version[1].count > aggregates.total * self.DOMINANT_SHARE:
            recommendations.append(f"Immediately investigate Version {top_version[0]} for regressions")

        if critical_count > 0:
            recommendations.append(f"Address {critical_count} critical stability issues as highest priority")

        if spikes:
            recommendations.append("Review deployment and release processes around spike dates")

        top_pattern = _top(aggregates.patterns.items(), lambda p: p.total)
        if top_pattern:
            recommendations.append(f"Focus QA testing on \"{top_pattern[1].description}\" scenarios")

        return recommendations

