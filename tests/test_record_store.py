# tests/test_record_store.py

import pytest

from errors import DuplicateKeyError, InvalidSemesterError, NotFoundError
from models import Admin, DEFAULT_PHOTO_URL, Student


def build_student(reg_no, name="Student"):
    return Student(reg_no=reg_no, dob="2003-04-15", department="CSE", name=name)


def test_insert_and_find_student(store):
    store.insert_student(build_student("21CS001", "Asha Rao"))

    student = store.find_student("21CS001")

    assert student.name == "Asha Rao"
    assert student.photo_url == DEFAULT_PHOTO_URL
    assert student.marks == {f"sem{i}": [] for i in range(1, 7)}
    assert student.created_at is not None
    assert student.created_at == student.updated_at


def test_find_missing_student_returns_none(store):
    assert store.find_student("nope") is None


def test_duplicate_student_keeps_first_record(store):
    store.insert_student(build_student("21CS001", "First"))

    with pytest.raises(DuplicateKeyError):
        store.insert_student(build_student("21CS001", "Second"))

    assert store.find_student("21CS001").name == "First"
    assert len(store.find_students_all()) == 1


def test_find_all_sorted_by_reg_no(store):
    for reg_no in ["21CS003", "21CS001", "21CS002"]:
        store.insert_student(build_student(reg_no))

    assert [s.reg_no for s in store.find_students_all()] == ["21CS001", "21CS002", "21CS003"]


def test_update_marks_touches_one_semester(store):
    student = build_student("21CS001")
    student.marks["sem1"] = [70, 80]
    store.insert_student(student)

    updated = store.update_student_marks("21CS001", "sem3", [60, 70])

    assert updated.marks["sem3"] == [60, 70]
    assert updated.marks["sem1"] == [70, 80]
    assert store.find_student("21CS001").marks["sem3"] == [60, 70]


def test_update_marks_missing_student(store):
    with pytest.raises(NotFoundError):
        store.update_student_marks("nope", "sem1", [50])


def test_update_marks_rejects_unknown_semester(store):
    store.insert_student(build_student("21CS001"))

    with pytest.raises(InvalidSemesterError):
        store.update_student_marks("21CS001", "sem1 = '[]'; --", [50])


def test_delete_student(store):
    store.insert_student(build_student("21CS001"))

    store.delete_student("21CS001")

    assert store.find_student("21CS001") is None
    with pytest.raises(NotFoundError):
        store.delete_student("21CS001")


def test_returned_records_are_detached(store):
    store.insert_student(build_student("21CS001"))

    student = store.find_student("21CS001")
    student.marks["sem1"].append(99)

    assert store.find_student("21CS001").marks["sem1"] == []


def test_admin_insert_find_and_duplicate(store):
    store.insert_admin(Admin(admin_id="root", password_hash="hash", name="Root"))

    admin = store.find_admin("root")
    assert admin.name == "Root"
    assert admin.password_hash == "hash"
    assert store.find_admin("nobody") is None

    with pytest.raises(DuplicateKeyError):
        store.insert_admin(Admin(admin_id="root", password_hash="other", name="Other"))
    assert store.find_admin("root").name == "Root"
