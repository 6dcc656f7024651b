import os
import logging

from flask import Blueprint, Flask, current_app, jsonify, request, send_file, send_from_directory
from flask_cors import CORS
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from config import Config
from errors import RecordsError
from excel_handler import ExcelHandler
from photo_storage import PhotoStorage
from record_store import SQLiteRecordStore
from records_manager import StudentRecordsManager

# Set up logging
logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

records = Blueprint('records', __name__)


def get_manager() -> StudentRecordsManager:
    return current_app.extensions['student_records']


def request_data():
    """Accept JSON object bodies as well as url-encoded or multipart forms."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) and data else request.form


@records.route('/login', methods=['POST'])
def student_login():
    data = request_data()
    result = get_manager().student_login(data.get('regNo'), data.get('dob'), data.get('department'))
    return jsonify({
        'success': True,
        'message': 'Login successful',
        'student': result['student'],
        'redirect': result['redirect']
    })


@records.route('/admin/login', methods=['POST'])
def admin_login():
    data = request_data()
    result = get_manager().admin_login(data.get('adminId'), data.get('password'))
    return jsonify({
        'success': True,
        'message': 'Admin login successful',
        'admin': result['admin'],
        'redirect': result['redirect']
    })


@records.route('/admin/add-student', methods=['POST'])
def add_student():
    form = request.form
    student = get_manager().add_student(
        form.get('regNo'),
        form.get('dob'),
        form.get('department'),
        form.get('name'),
        photo=request.files.get('photo'),
        sem1=form.get('sem1')
    )
    return jsonify({'success': True, 'message': 'Student added successfully', 'student': student})


@records.route('/admin/add-admin', methods=['POST'])
def add_admin():
    data = request_data()
    admin = get_manager().add_admin(data.get('adminId'), data.get('password'), data.get('name'))
    return jsonify({'success': True, 'message': 'Admin added successfully', 'admin': admin})


@records.route('/student/<reg_no>')
def get_student(reg_no):
    return jsonify({'success': True, 'student': get_manager().get_student(reg_no)})


@records.route('/admin/students')
def list_students():
    return jsonify({'success': True, 'students': get_manager().list_students()})


@records.route('/admin/update-marks', methods=['POST'])
def update_marks():
    data = request_data()
    student = get_manager().update_marks(data.get('regNo'), data.get('semester'), data.get('marks'))
    return jsonify({'success': True, 'message': 'Marks updated successfully', 'student': student})


@records.route('/admin/delete-student/<reg_no>', methods=['DELETE'])
def delete_student(reg_no):
    get_manager().delete_student(reg_no)
    return jsonify({'success': True, 'message': 'Student deleted successfully'})


@records.route('/admin/export-students')
def export_students():
    filepath = get_manager().export_students()
    return send_file(filepath, as_attachment=True, download_name=os.path.basename(filepath))


@records.route('/uploads/<path:filename>')
def uploaded_photo(filename):
    return send_from_directory(current_app.config['UPLOAD_FOLDER'], filename)


def error_response(message, status_code):
    return jsonify({'success': False, 'error': message}), status_code


def register_error_handlers(app):
    @app.errorhandler(RecordsError)
    def handle_records_error(e):
        return error_response(e.message, e.status_code)

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(e):
        return error_response('Uploaded file is too large', 413)

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        if e.code == 404:
            return error_response('Route not found', 404)
        return error_response(e.description, e.code)

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        logger.exception(f"Unhandled error on {request.method} {request.path}")
        return error_response('Internal server error. Please try again later.', 500)


def create_app(overrides=None, store=None):
    """
    Build the Flask application.

    overrides: mapping applied on top of Config (used by tests).
    store: a RecordStore to use instead of the configured SQLite database.
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    # Ensure directories exist
    app.config['UPLOAD_FOLDER'] = os.path.abspath(app.config['UPLOAD_FOLDER'])
    app.config['EXPORT_FOLDER'] = os.path.abspath(app.config['EXPORT_FOLDER'])
    photo_storage = PhotoStorage(app.config['UPLOAD_FOLDER'])
    excel_handler = ExcelHandler(app.config['EXPORT_FOLDER'])

    created_store = store is None
    if created_store:
        store = SQLiteRecordStore(app.config['DATABASE'])
    app.teardown_appcontext(store.close)
    if created_store:
        with app.app_context():
            store.init_db()

    app.extensions['student_records'] = StudentRecordsManager(store, photo_storage, excel_handler)

    CORS(app)
    app.register_blueprint(records)
    register_error_handlers(app)

    logger.info(f"Student records app ready (uploads: {app.config['UPLOAD_FOLDER']})")
    return app


if __name__ == '__main__':
    app = create_app()
    logger.info(f"Student Login: http://localhost:{Config.PORT}/login")
    logger.info(f"Admin Login: http://localhost:{Config.PORT}/admin/login")
    app.run(host=Config.HOST, port=Config.PORT, debug=Config.DEBUG)
