"""
Analysis Pipeline - Wires ingestion, classification, aggregation, insights and rendering
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from app.models import Aggregates, IssueRecord
from app.services.aggregator import Aggregator
from app.services.insight_generator import InsightGenerator
from app.services.pattern_matcher import PatternMatcher
from app.services.record_source import RecordSource
from app.services.report_renderer import ReportRenderer

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Output of one analysis run"""
    records: List[IssueRecord]
    aggregates: Aggregates
    insights: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.aggregates.total


class AnalysisPipeline:
    """
    Single pass, single threaded: ingest fully, fold fully, summarize, render.
    Every run gets a fresh Aggregates context.
    """

    def __init__(self, target_platform: str = 'ios', column_map: Optional[Dict[str, str]] = None,
                 platform_label: str = 'iOS'):
        self.source = RecordSource(target_platform, column_map)
        self.matcher = PatternMatcher()
        self.insight_generator = InsightGenerator(platform_label)
        self.renderer = ReportRenderer(self.matcher, platform_label)

    @classmethod
    def from_config(cls, app_config) -> 'AnalysisPipeline':
        return cls(
            target_platform=app_config.get('TARGET_PLATFORM', 'ios'),
            column_map=app_config.get('COLUMN_MAP'),
            platform_label=app_config.get('PLATFORM_LABEL', 'iOS'),
        )

    def analyze_records(self, records: List[IssueRecord]) -> AnalysisResult:
        aggregates = Aggregator().fold_all(records, self.matcher)
        insights = self.insight_generator.summarize(aggregates)
        return AnalysisResult(records=records, aggregates=aggregates, insights=insights)

    def analyze_text(self, text: str) -> AnalysisResult:
        return self.analyze_records(self.source.parse_text(text))

    def analyze_file(self, file_path) -> AnalysisResult:
        """Raises FileNotFoundError before any stage runs if the export is missing"""
        return self.analyze_records(self.source.load(file_path))

    def render(self, result: AnalysisResult) -> str:
        return self.renderer.render(result.aggregates, result.insights)

    def document(self, result: AnalysisResult) -> Dict:
        return self.renderer.build_document(result.aggregates, result.insights)
