"""
Services module for Issue Pattern Analyzer
"""
from app.services.record_source import RecordSource
from app.services.pattern_matcher import PatternMatcher
from app.services.aggregator import Aggregator, parse_tags
from app.services.insight_generator import InsightGenerator
from app.services.report_renderer import ReportRenderer
from app.services.pipeline import AnalysisPipeline, AnalysisResult

__all__ = ['RecordSource', 'PatternMatcher', 'Aggregator', 'parse_tags', 'InsightGenerator', 'ReportRenderer', 'AnalysisPipeline', 'AnalysisResult']
