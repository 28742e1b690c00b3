#!/usr/bin/env python3
"""
Issue Pattern Analyzer - Main Entry Point

Analyzes a CSV export of product-support issues for one platform.
Detects crash, freeze and stuck-UI patterns, rolls them up by app version
and by day, and writes an interactive HTML report with plain English insights.

Usage:
    issue-analyzer                                # installed via pip
    python main.py [--input CSV] [--output HTML] [--platform ios] [--json PATH]
    python main.py --serve [--host HOST] [--port PORT]

Example:
    issue-analyzer --input unresolved_issues_past_3_months.csv --output report.html
    python main.py --serve --port 9898
"""

import argparse
import json
import logging
import os
import sys
import threading
import webbrowser
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()

from app import create_app

logger = logging.getLogger('issue_analyzer')


def parse_args(argv=None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        description='Issue Pattern Analyzer - Version and trend report for support-issue exports'
    )
    parser.add_argument(
        '--input',
        help='CSV export to analyze (default: INPUT_CSV)'
    )
    parser.add_argument(
        '--output',
        help='HTML report to write (default: OUTPUT_REPORT)'
    )
    parser.add_argument(
        '--platform',
        help='Platform value to keep (default: TARGET_PLATFORM)'
    )
    parser.add_argument(
        '--json',
        dest='json_path',
        help='Also write the analysis document as JSON to this path'
    )
    parser.add_argument(
        '--config',
        default='default',
        choices=['development', 'production', 'default'],
        help='Configuration to use (default: default)'
    )
    parser.add_argument(
        '--serve',
        action='store_true',
        help='Serve the report over HTTP instead of writing a file'
    )
    parser.add_argument(
        '--host',
        default='127.0.0.1',
        help='Host to bind to when serving (default: 127.0.0.1)'
    )
    parser.add_argument(
        '--port',
        type=int,
        default=9898,
        help='Port to listen on when serving (default: 9898)'
    )
    parser.add_argument(
        '--no-browser',
        action='store_true',
        help='Do not auto-open browser when serving'
    )
    return parser.parse_args(argv)


def configure_logging(level_name):
    logging.basicConfig(
        level=getattr(logging, str(level_name).upper(), logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )


def run_analysis(app, args):
    """Run the pipeline once and write the report. Returns a process exit code."""
    from app.services import AnalysisPipeline

    input_csv = args.input or app.config['INPUT_CSV']
    output = args.output or app.config['OUTPUT_REPORT']

    pipeline = AnalysisPipeline.from_config(app.config)

    logger.info("Starting Enhanced Analysis with Pattern Detection...")
    try:
        result = pipeline.analyze_file(input_csv)
    except FileNotFoundError as e:
        logger.error(str(e))
        return 1

    with app.app_context():
        html = pipeline.render(result)
    pipeline.renderer.write(output, html)

    if args.json_path:
        json_path = Path(args.json_path)
        json_path.parent.mkdir(parents=True, exist_ok=True)
        json_path.write_text(json.dumps(pipeline.document(result), indent=2), encoding='utf-8')
        logger.info(f"Analysis document written: {json_path}")

    logger.info(f"Analysis complete: {result.total} issues, "
                f"{len(result.aggregates.patterns)} pattern types, {len(result.insights)} insights")
    logger.info(f"Report: {output}")
    return 0


def main(argv=None):
    """Main entry point"""
    args = parse_args(argv)

    app = create_app(args.config)
    configure_logging(app.config.get('LOG_LEVEL', 'INFO'))

    if args.input:
        app.config['INPUT_CSV'] = args.input
    if args.platform:
        app.config['TARGET_PLATFORM'] = args.platform

    if not args.serve:
        return run_analysis(app, args)

    from config import APP_VERSION

    url = f"http://{args.host}:{args.port}"

    # Print startup banner
    print(f"""
    ============================================
    Issue Pattern Analyzer v{APP_VERSION}
    ============================================
    Open:     {url}
    Input:    {app.config['INPUT_CSV']}
    Platform: {app.config['TARGET_PLATFORM']}
    ============================================
    """)

    # Auto-open browser (with delay so server starts first)
    if not args.no_browser and not os.environ.get('WERKZEUG_RUN_MAIN'):
        # Only open on the initial process, not the reloader child
        threading.Timer(1.5, lambda: webbrowser.open(url)).start()

    app.run(
        host=args.host,
        port=args.port,
        debug=app.config.get('DEBUG', False)
    )
    return 0


if __name__ == '__main__':
    sys.exit(main())
