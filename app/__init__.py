"""
Issue Pattern Analyzer - Flask Application Factory
"""
import json
import logging
import re

import click
from flask import Flask, render_template, request, jsonify
from markupsafe import Markup, escape

from config import config

logger = logging.getLogger(__name__)


def create_app(config_name='default'):
    """Application factory pattern"""
    app = Flask(__name__)
    app.config.from_object(config[config_name])

    # Register custom Jinja2 filters
    @app.template_filter('emphasis')
    def emphasis_filter(value):
        """Escape text and turn **bold** markers into <strong> tags"""
        escaped = str(escape(value or ''))
        return Markup(re.sub(r'\*\*(.+?)\*\*', r'<strong>\1</strong>', escaped))

    @app.template_filter('to_json')
    def to_json_filter(value):
        """Serialize a value for embedding in an inline <script>"""
        return Markup(json.dumps(value).replace('</', '<\\/'))

    @app.context_processor
    def inject_globals():
        from config import APP_VERSION
        return dict(app_version=APP_VERSION)

    # Error handlers
    def _wants_json():
        return request.path.startswith('/api/')

    @app.errorhandler(404)
    def not_found_error(error):
        """Handle 404 errors."""
        if _wants_json():
            return jsonify({'error': getattr(error, 'description', 'Not found')}), 404
        return render_template('error.html', code=404, message=getattr(error, 'description', 'Not found')), 404

    @app.errorhandler(400)
    def bad_request_error(error):
        """Handle 400 errors."""
        if _wants_json():
            return jsonify({'error': getattr(error, 'description', 'Bad request')}), 400
        return render_template('error.html', code=400, message=getattr(error, 'description', 'Bad request')), 400

    @app.errorhandler(413)
    def request_entity_too_large(error):
        """Handle file too large errors."""
        return render_template('error.html', code=413, message='The uploaded CSV export is too large.'), 413

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        logger.error(f"Internal server error: {error}")
        if _wants_json():
            return jsonify({'error': 'Internal server error'}), 500
        return render_template('error.html', code=500, message='Internal server error'), 500

    # Register blueprints
    from app.routes import main_bp, api_bp
    app.register_blueprint(main_bp)
    app.register_blueprint(api_bp, url_prefix='/api')

    # CLI command to write a static report without starting the server
    @app.cli.command('render-report')
    @click.argument('input_csv', type=click.Path(dir_okay=False))
    @click.argument('output', required=False, type=click.Path(dir_okay=False))
    @click.option('--platform', default=None, help='Platform value to keep (default: TARGET_PLATFORM)')
    def render_report_command(input_csv, output, platform):
        """Analyze INPUT_CSV and write the interactive HTML report."""
        from app.services import AnalysisPipeline

        pipeline = AnalysisPipeline.from_config(app.config)
        if platform:
            pipeline.source.target_platform = platform
        try:
            result = pipeline.analyze_file(input_csv)
        except FileNotFoundError as e:
            raise click.ClickException(str(e))

        output = output or app.config['OUTPUT_REPORT']
        pipeline.renderer.write(output, pipeline.render(result))
        click.echo(f'Analyzed {result.total} issues, report written to {output}')

    return app
