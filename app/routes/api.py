"""
API routes - JSON endpoints exposing the analysis document
"""
from flask import jsonify, current_app

from app.routes import api_bp
from app.services import AnalysisPipeline, PatternMatcher


def _analyze_configured_input():
    pipeline = AnalysisPipeline.from_config(current_app.config)
    try:
        result = pipeline.analyze_file(current_app.config['INPUT_CSV'])
    except FileNotFoundError as e:
        return pipeline, None, str(e)
    return pipeline, result, None


@api_bp.route('/analysis', methods=['GET'])
def get_analysis():
    """Full output document: totals, the four rollups and the findings"""
    pipeline, result, error = _analyze_configured_input()
    if error:
        return jsonify({'error': error}), 404
    return jsonify(pipeline.document(result))


@api_bp.route('/insights', methods=['GET'])
def get_insights():
    """Plain English findings only"""
    _, result, error = _analyze_configured_input()
    if error:
        return jsonify({'error': error}), 404
    return jsonify({'total_issues': result.total, 'insights': result.insights})


@api_bp.route('/patterns', methods=['GET'])
def get_patterns():
    """The fixed pattern catalog"""
    return jsonify(PatternMatcher().catalog_as_dicts())
