import logging
from typing import Dict, List

from werkzeug.security import check_password_hash, generate_password_hash

from errors import AuthFailedError, DuplicateKeyError, NotFoundError
from models import Admin, Student, empty_marks
from photo_storage import PhotoStorage
from record_store import RecordStore
from validators import (
    normalize_date, parse_marks, validate_password_strength, validate_required_fields,
    validate_semester
)

STUDENT_DASHBOARD = '/student-dashboard'
ADMIN_DASHBOARD = '/admin-dashboard'


def _clean(value) -> str:
    return str(value).strip() if value is not None else ''


class StudentRecordsManager:
    """
    Business rules for student and admin records.

    Each method validates its input completely before it reads from or
    writes to the store, and performs at most one store mutation.
    """

    def __init__(self, store: RecordStore, photo_storage: PhotoStorage, excel_handler=None):
        self.logger = logging.getLogger(__name__)
        self.store = store
        self.photo_storage = photo_storage
        self.excel_handler = excel_handler

    def student_login(self, reg_no, dob, department) -> Dict:
        validate_required_fields({'regNo': reg_no, 'dob': dob, 'department': department})
        formatted_dob = normalize_date(dob)

        student = self.store.find_student(_clean(reg_no))
        if (student is None or student.dob != formatted_dob
                or student.department != _clean(department)):
            self.logger.warning("Rejected student login")
            raise AuthFailedError(
                "Invalid login credentials. Please check your registration number, "
                "date of birth, and department."
            )

        self.logger.info(f"Student {student.reg_no} logged in")
        return {'student': student.login_view(), 'redirect': STUDENT_DASHBOARD}

    def admin_login(self, admin_id, password) -> Dict:
        validate_required_fields(
            {'adminId': admin_id, 'password': password},
            "Admin ID and password are required"
        )

        admin = self.store.find_admin(_clean(admin_id))
        if admin is None or not check_password_hash(admin.password_hash, _clean(password)):
            self.logger.warning("Rejected admin login")
            raise AuthFailedError(
                "Invalid admin credentials. Please check your Admin ID and password."
            )

        self.logger.info(f"Admin {admin.admin_id} logged in")
        return {'admin': admin.to_dict(), 'redirect': ADMIN_DASHBOARD}

    def add_student(self, reg_no, dob, department, name, photo=None, sem1=None) -> Dict:
        """
        Register a new student with a photo and optional first semester marks.

        The photo is written only once everything else has been accepted; if
        the store then fails to insert the record the photo is removed again.
        """
        photo_name = photo.filename if photo is not None else None
        validate_required_fields(
            {'regNo': reg_no, 'dob': dob, 'department': department,
             'name': name, 'photo': photo_name},
            "All fields including photo are required"
        )
        self.photo_storage.check(photo)

        marks = empty_marks()
        if _clean(sem1):
            marks['sem1'] = parse_marks(sem1)
        formatted_dob = normalize_date(dob)

        reg_no = _clean(reg_no)
        if self.store.find_student(reg_no) is not None:
            raise DuplicateKeyError("Student with this registration number already exists")

        photo_url = self.photo_storage.save(photo)
        student = Student(
            reg_no=reg_no,
            dob=formatted_dob,
            department=_clean(department),
            name=_clean(name),
            photo_url=photo_url,
            marks=marks,
        )
        try:
            self.store.insert_student(student)
        except Exception:
            self.photo_storage.discard(photo_url)
            raise

        self.logger.info(f"Added student {reg_no}")
        return student.summary_view()

    def add_admin(self, admin_id, password, name) -> Dict:
        validate_required_fields({'adminId': admin_id, 'password': password, 'name': name})
        password = _clean(password)
        validate_password_strength(password)

        admin_id = _clean(admin_id)
        if self.store.find_admin(admin_id) is not None:
            raise DuplicateKeyError("Admin with this ID already exists")

        admin = Admin(
            admin_id=admin_id,
            password_hash=generate_password_hash(password),
            name=_clean(name),
        )
        self.store.insert_admin(admin)

        self.logger.info(f"Added admin {admin_id}")
        return admin.to_dict()

    def list_students(self) -> List[Dict]:
        return [student.to_dict() for student in self.store.find_students_all()]

    def get_student(self, reg_no) -> Dict:
        student = self.store.find_student(_clean(reg_no))
        if student is None:
            raise NotFoundError("Student not found")
        return student.to_dict()

    def update_marks(self, reg_no, semester, marks) -> Dict:
        validate_required_fields({'regNo': reg_no, 'semester': semester, 'marks': marks})
        semester = validate_semester(semester)
        marks_list = parse_marks(marks)

        student = self.store.update_student_marks(_clean(reg_no), semester, marks_list)

        self.logger.info(f"Updated {semester} marks for student {student.reg_no}")
        return student.marks_view()

    def delete_student(self, reg_no) -> None:
        reg_no = _clean(reg_no)
        self.store.delete_student(reg_no)
        self.logger.info(f"Deleted student {reg_no}")

    def export_students(self) -> str:
        """Write the full roster to an Excel workbook and return its path."""
        filepath = self.excel_handler.export_students(self.store.find_students_all())
        self.logger.info(f"Exported students to {filepath}")
        return filepath
