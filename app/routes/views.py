"""
View routes - Renders the interactive report in the browser
"""
import logging

from flask import render_template, request, redirect, flash, current_app, abort
from werkzeug.utils import secure_filename

from app.routes import main_bp
from app.services import AnalysisPipeline

logger = logging.getLogger(__name__)


def allowed_file(filename):
    """Only CSV exports can be analyzed"""
    return '.' in filename and filename.rsplit('.', 1)[1].lower() == 'csv'


@main_bp.route('/')
def index():
    """Report for the configured CSV export"""
    pipeline = AnalysisPipeline.from_config(current_app.config)
    try:
        result = pipeline.analyze_file(current_app.config['INPUT_CSV'])
    except FileNotFoundError as e:
        logger.error(str(e))
        abort(404, description=f"{e}. Upload an export instead.")

    return pipeline.render(result)


@main_bp.route('/upload', methods=['GET', 'POST'])
def upload():
    """Analyze an uploaded CSV export without storing it"""
    if request.method == 'POST':
        if 'file' not in request.files:
            flash('No file selected', 'error')
            return redirect(request.url)

        file = request.files['file']
        if file.filename == '':
            flash('No file selected', 'error')
            return redirect(request.url)

        if not allowed_file(file.filename):
            flash('File type not allowed. Please upload a .csv export.', 'error')
            return redirect(request.url)

        filename = secure_filename(file.filename)
        pipeline = AnalysisPipeline.from_config(current_app.config)
        platform = request.form.get('platform', '').strip()
        if platform:
            pipeline.source.target_platform = platform

        text = pipeline.source.decode(file.read())
        result = pipeline.analyze_text(text)
        logger.info(f"Analyzed upload {filename}: {result.total} issues")
        return pipeline.render(result)

    return render_template('upload.html', target_platform=current_app.config['TARGET_PLATFORM'])

