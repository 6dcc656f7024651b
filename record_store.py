import copy
import json
import logging
import sqlite3
import threading
from datetime import datetime, timezone
from typing import Dict, List, Optional

from flask import g, has_app_context

from errors import DuplicateKeyError, InvalidSemesterError, NotFoundError
from models import Admin, DEFAULT_PHOTO_URL, Student
from validators import SEMESTERS


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds')


class RecordStore:
    """
    Storage for Student and Admin records.

    Every mutation touches a single record and is atomic on its own.
    Unique keys (regNo, adminId) are enforced here, not by callers.
    """

    def find_student(self, reg_no: str) -> Optional[Student]:
        raise NotImplementedError

    def find_students_all(self) -> List[Student]:
        raise NotImplementedError

    def insert_student(self, student: Student) -> Student:
        raise NotImplementedError

    def update_student_marks(self, reg_no: str, semester: str, marks: List[int]) -> Student:
        raise NotImplementedError

    def delete_student(self, reg_no: str) -> None:
        raise NotImplementedError

    def find_admin(self, admin_id: str) -> Optional[Admin]:
        raise NotImplementedError

    def insert_admin(self, admin: Admin) -> Admin:
        raise NotImplementedError

    def close(self, e=None) -> None:
        pass


class SQLiteRecordStore(RecordStore):
    """SQLite backed store. Inside a Flask app context the connection lives on g."""

    def __init__(self, database: str):
        self.database = database
        self.logger = logging.getLogger(__name__)
        self._db = None

    def _connect(self) -> sqlite3.Connection:
        db = sqlite3.connect(self.database)
        db.row_factory = sqlite3.Row
        return db

    def get_db(self) -> sqlite3.Connection:
        """Get a database connection"""
        if has_app_context():
            if 'records_db' not in g:
                g.records_db = self._connect()
            return g.records_db
        if self._db is None:
            self._db = self._connect()
        return self._db

    def close(self, e=None) -> None:
        """Close the database connection"""
        db = g.pop('records_db', None) if has_app_context() else None
        if db is not None:
            db.close()
        elif self._db is not None:
            self._db.close()
            self._db = None

    def init_db(self) -> None:
        """Initialize the database with required tables"""
        db = self.get_db()
        semester_columns = ",\n".join(
            f"{semester} TEXT NOT NULL DEFAULT '[]'" for semester in SEMESTERS
        )

        db.execute(f"""
            CREATE TABLE IF NOT EXISTS students (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                reg_no TEXT UNIQUE NOT NULL,
                dob TEXT NOT NULL,
                department TEXT NOT NULL,
                name TEXT NOT NULL,
                photo_url TEXT NOT NULL DEFAULT '{DEFAULT_PHOTO_URL}',
                {semester_columns},
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        db.execute("""
            CREATE TABLE IF NOT EXISTS admins (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                admin_id TEXT UNIQUE NOT NULL,
                password_hash TEXT NOT NULL,
                name TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        db.commit()

    def query_db(self, query, args=(), one=False):
        """Execute a query and return results"""
        cur = self.get_db().execute(query, args)
        rv = cur.fetchall()
        cur.close()
        return (rv[0] if rv else None) if one else rv

    def execute_db(self, query, args=()) -> int:
        """Execute a statement and return the number of rows it touched"""
        db = self.get_db()
        try:
            cur = db.execute(query, args)
            db.commit()
        except sqlite3.Error:
            db.rollback()
            raise
        count = cur.rowcount
        cur.close()
        return count

    @staticmethod
    def _row_to_student(row) -> Student:
        return Student(
            reg_no=row['reg_no'],
            dob=row['dob'],
            department=row['department'],
            name=row['name'],
            photo_url=row['photo_url'],
            marks={semester: json.loads(row[semester]) for semester in SEMESTERS},
            created_at=row['created_at'],
            updated_at=row['updated_at'],
        )

    @staticmethod
    def _row_to_admin(row) -> Admin:
        return Admin(
            admin_id=row['admin_id'],
            password_hash=row['password_hash'],
            name=row['name'],
            created_at=row['created_at'],
            updated_at=row['updated_at'],
        )

    # Student operations
    def find_student(self, reg_no: str) -> Optional[Student]:
        row = self.query_db("SELECT * FROM students WHERE reg_no = ?", [reg_no], one=True)
        return self._row_to_student(row) if row else None

    def find_students_all(self) -> List[Student]:
        rows = self.query_db("SELECT * FROM students ORDER BY reg_no")
        return [self._row_to_student(row) for row in rows]

    def insert_student(self, student: Student) -> Student:
        now = utc_now()
        columns = ['reg_no', 'dob', 'department', 'name', 'photo_url'] + list(SEMESTERS) + ['created_at', 'updated_at']
        values = [student.reg_no, student.dob, student.department, student.name, student.photo_url]
        values += [json.dumps(student.marks.get(semester, [])) for semester in SEMESTERS]
        values += [now, now]
        try:
            self.execute_db(
                f"INSERT INTO students ({', '.join(columns)}) VALUES ({', '.join(['?'] * len(columns))})",
                values
            )
        except sqlite3.IntegrityError:
            raise DuplicateKeyError("Student with this registration number already exists")
        student.created_at = now
        student.updated_at = now
        return student

    def update_student_marks(self, reg_no: str, semester: str, marks: List[int]) -> Student:
        # Column name is interpolated, so it must come from the fixed set
        if semester not in SEMESTERS:
            raise InvalidSemesterError()
        updated = self.execute_db(
            f"UPDATE students SET {semester} = ?, updated_at = ? WHERE reg_no = ?",
            (json.dumps(list(marks)), utc_now(), reg_no)
        )
        if not updated:
            raise NotFoundError("Student not found")
        return self.find_student(reg_no)

    def delete_student(self, reg_no: str) -> None:
        deleted = self.execute_db("DELETE FROM students WHERE reg_no = ?", [reg_no])
        if not deleted:
            raise NotFoundError("Student not found")

    # Admin operations
    def find_admin(self, admin_id: str) -> Optional[Admin]:
        row = self.query_db("SELECT * FROM admins WHERE admin_id = ?", [admin_id], one=True)
        return self._row_to_admin(row) if row else None

    def insert_admin(self, admin: Admin) -> Admin:
        now = utc_now()
        try:
            self.execute_db(
                """INSERT INTO admins (admin_id, password_hash, name, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)""",
                (admin.admin_id, admin.password_hash, admin.name, now, now)
            )
        except sqlite3.IntegrityError:
            raise DuplicateKeyError("Admin with this ID already exists")
        admin.created_at = now
        admin.updated_at = now
        return admin


class InMemoryRecordStore(RecordStore):
    """Dictionary backed store for tests and throwaway demos."""

    def __init__(self):
        self._students: Dict[str, Student] = {}
        self._admins: Dict[str, Admin] = {}
        self._lock = threading.Lock()

    def find_student(self, reg_no: str) -> Optional[Student]:
        with self._lock:
            student = self._students.get(reg_no)
            return copy.deepcopy(student) if student else None

    def find_students_all(self) -> List[Student]:
        with self._lock:
            return [copy.deepcopy(self._students[reg_no]) for reg_no in sorted(self._students)]

    def insert_student(self, student: Student) -> Student:
        with self._lock:
            if student.reg_no in self._students:
                raise DuplicateKeyError("Student with this registration number already exists")
            student.created_at = student.updated_at = utc_now()
            self._students[student.reg_no] = copy.deepcopy(student)
            return student

    def update_student_marks(self, reg_no: str, semester: str, marks: List[int]) -> Student:
        if semester not in SEMESTERS:
            raise InvalidSemesterError()
        with self._lock:
            student = self._students.get(reg_no)
            if student is None:
                raise NotFoundError("Student not found")
            student.marks[semester] = list(marks)
            student.updated_at = utc_now()
            return copy.deepcopy(student)

    def delete_student(self, reg_no: str) -> None:
        with self._lock:
            if self._students.pop(reg_no, None) is None:
                raise NotFoundError("Student not found")

    def find_admin(self, admin_id: str) -> Optional[Admin]:
        with self._lock:
            admin = self._admins.get(admin_id)
            return copy.deepcopy(admin) if admin else None

    def insert_admin(self, admin: Admin) -> Admin:
        with self._lock:
            if admin.admin_id in self._admins:
                raise DuplicateKeyError("Admin with this ID already exists")
            admin.created_at = admin.updated_at = utc_now()
            self._admins[admin.admin_id] = copy.deepcopy(admin)
            return admin
