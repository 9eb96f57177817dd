"""
Team Survey Web Application
===========================

Flask-based operator interface for the team formation survey.
Each route runs one operator action (the same ones as the command line) and
answers with JSON. The results route can also return the results table as an
Excel or CSV download.
"""

# =============================================================================
# Imports
# =============================================================================

import io
import math
import os
import sys
import traceback
import uuid
from datetime import datetime

import numpy as np
import pandas as pd
from flask import Flask, jsonify, request, send_file
from werkzeug.utils import secure_filename

# Add parent directory to path to import the survey package
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from team_survey import operations
from team_survey.errors import SurveyError
from team_survey.form_host import LocalFormHost
from team_survey.session import DEFAULT_FORMS_DIR, DEFAULT_WORKBOOK, SurveySession
from team_survey.workbook import WorkbookStore


# =============================================================================
# Flask App Configuration
# =============================================================================

app = Flask(__name__)
app.config['MAX_CONTENT_LENGTH'] = 16 * 1024 * 1024  # 16MB max file size
app.config['UPLOAD_FOLDER'] = os.path.join(os.path.dirname(__file__), 'uploads')
app.config['WORKBOOK_PATH'] = os.environ.get('TEAM_SURVEY_WORKBOOK', DEFAULT_WORKBOOK)
app.config['FORMS_DIR'] = os.environ.get('TEAM_SURVEY_FORMS_DIR', DEFAULT_FORMS_DIR)
app.config['VERBOSE'] = False


# =============================================================================
# Utility Functions
# =============================================================================

def clean_for_json(obj):
    """
    Recursively clean an object for JSON serialization.
    Handles NaN, Infinity, numpy types, and pandas NA values.
    """
    if isinstance(obj, dict):
        return {k: clean_for_json(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [clean_for_json(item) for item in obj]
    elif isinstance(obj, float):
        if math.isnan(obj) or math.isinf(obj):
            return None
        return obj
    elif isinstance(obj, (np.integer, np.floating)):
        if np.isnan(obj) or np.isinf(obj):
            return None
        return obj.item()
    elif isinstance(obj, np.ndarray):
        return clean_for_json(obj.tolist())
    elif obj is None or isinstance(obj, (str, bool, int)):
        return obj
    elif pd.isna(obj):
        return None
    return obj


def open_session() -> SurveySession:
    """A fresh session per request; nothing is cached between requests."""
    verbose = app.config['VERBOSE']
    store = WorkbookStore(path=app.config['WORKBOOK_PATH'], verbose=verbose)
    return SurveySession(store, LocalFormHost(app.config['FORMS_DIR']), verbose=verbose)


def error_response(e: Exception):
    # FormNotFoundError is both a SurveyError and a KeyError
    if isinstance(e, (FileNotFoundError, KeyError)):
        return jsonify({'error': str(e), 'type': type(e).__name__}), 404
    if isinstance(e, (SurveyError, ValueError)):
        return jsonify({'error': str(e), 'type': type(e).__name__}), 400
    traceback.print_exc()
    return jsonify({'error': str(e), 'type': type(e).__name__}), 500


def run_action(action, *args, **kwargs):
    """Runs an operator action in a new session and returns its JSON response."""
    try:
        session = open_session()
        result = action(session, *args, **kwargs)
        return jsonify(clean_for_json({'status': 'ok', 'result': result}))
    except Exception as e:
        return error_response(e)


# =============================================================================
# Routes
# =============================================================================

@app.route('/')
def index():
    """List the available actions."""
    return jsonify({
        'workbook': app.config['WORKBOOK_PATH'],
        'actions': sorted(str(rule) for rule in app.url_map.iter_rules() if rule.endpoint != 'static'),
    })


@app.route('/workbook', methods=['POST'])
def init_workbook():
    try:
        path = operations.init_workbook(app.config['WORKBOOK_PATH'], verbose=app.config['VERBOSE'])
        return jsonify({'status': 'ok', 'result': path})
    except Exception as e:
        return error_response(e)


@app.route('/roster', methods=['POST'])
def upload_roster():
    """
    Replace the roster with an uploaded file.

    Expects:
        - file: CSV or Excel file, full name in the first column and the ID in
          the second

    Returns:
        JSON with the number of imported rows or error message
    """
    if 'file' not in request.files:
        return jsonify({'error': 'No file uploaded'}), 400

    file = request.files['file']
    if file.filename == '':
        return jsonify({'error': 'No file selected'}), 400

    if not file.filename.endswith(('.csv', '.xlsx', '.xls')):
        return jsonify({'error': 'Please upload a CSV or Excel file (.csv, .xlsx or .xls)'}), 400

    # Save uploaded file
    os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)
    filename = secure_filename(file.filename)
    filepath = os.path.join(app.config['UPLOAD_FOLDER'], f"{uuid.uuid4()}_{filename}")
    file.save(filepath)

    return run_action(operations.import_roster, filepath)


@app.route('/form', methods=['POST'])
def create_form():
    return run_action(operations.create_form)


@app.route('/form', methods=['PUT'])
def update_form():
    return run_action(operations.update_form)


@app.route('/form', methods=['DELETE'])
def delete_form():
    return run_action(operations.delete_form)


@app.route('/form/items', methods=['DELETE'])
def clear_form():
    return run_action(operations.clear_form)


@app.route('/results', methods=['POST'])
def generate_results():
    return run_action(operations.generate_results)


@app.route('/results/<format_type>')
def download_results(format_type):
    """
    Download the current results table.

    Args:
        format_type: 'excel' or 'csv'

    Returns:
        File download response
    """
    if format_type not in ('excel', 'csv'):
        return jsonify({'error': 'Invalid format'}), 400

    file_format = 'csv' if format_type == 'csv' else 'xlsx'
    output = io.BytesIO()
    try:
        session = open_session()
        compiler = session.results()
        table = compiler.compile(session.students().get_all())
        compiler.export(table, output, file_format=file_format)
    except Exception as e:
        return error_response(e)
    output.seek(0)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    if file_format == 'csv':
        return send_file(output, mimetype='text/csv', as_attachment=True,
                         download_name=f'team_survey_results_{timestamp}.csv')

    return send_file(
        output,
        mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        as_attachment=True,
        download_name=f'team_survey_results_{timestamp}.xlsx'
    )


@app.route('/test-responses/<student_id>', methods=['POST'])
def add_test_response(student_id):
    seed = request.args.get('seed', type=int)
    return run_action(operations.add_test_response, student_id, seed=seed)


@app.route('/test-responses', methods=['POST'])
def add_test_responses():
    seed = request.args.get('seed', type=int)
    return run_action(operations.add_test_responses, seed=seed)


@app.route('/responses', methods=['DELETE'])
def permanently_clear_responses():
    return run_action(operations.permanently_clear_responses)


@app.route('/config/proficiency-questions/rows', methods=['POST'])
def add_proficiency_row():
    return run_action(operations.add_row_to_proficiency_questions)


@app.route('/config/proficiency-questions/rows', methods=['DELETE'])
def remove_proficiency_row():
    return run_action(operations.remove_row_from_proficiency_questions)


# =============================================================================
# Main Entry Point
# =============================================================================

if __name__ == '__main__':
    port = int(os.environ.get('PORT', 5000))
    app.run(debug=False, host='0.0.0.0', port=port)
