#!/usr/bin/env python3
"""
Seed the configured database with a demo admin and realistic student records.
"""
import random
import logging

from faker import Faker
from werkzeug.security import generate_password_hash

from config import Config
from errors import DuplicateKeyError
from models import Admin, Student, empty_marks
from record_store import RecordStore, SQLiteRecordStore
from validators import SEMESTERS

logger = logging.getLogger(__name__)

DEPARTMENTS = ['CSE', 'ECE', 'EEE', 'MECH', 'CIVIL', 'IT']
SUBJECTS_PER_SEMESTER = 5

DEMO_ADMIN_ID = 'admin'
DEMO_ADMIN_PASSWORD = 'admin123'


def create_demo_students(count=30, completed_semesters=3, seed=None):
    """Create students with marks filled in for the first completed_semesters."""
    fake = Faker('en_IN')  # Indian locale for better names
    rng = random.Random(seed)
    if seed is not None:
        Faker.seed(seed)

    students = []
    for i in range(count):
        department = rng.choice(DEPARTMENTS)
        marks = empty_marks()
        for semester in SEMESTERS[:completed_semesters]:
            marks[semester] = [rng.randint(35, 100) for _ in range(SUBJECTS_PER_SEMESTER)]

        students.append(Student(
            reg_no=f"{department}{2021000 + i + 1}",
            dob=fake.date_of_birth(minimum_age=18, maximum_age=23).strftime('%Y-%m-%d'),
            department=department,
            name=fake.name(),
            marks=marks,
        ))
    return students


def seed_store(store: RecordStore, students):
    """Insert the demo admin and students, skipping records that already exist."""
    added = 0
    duplicates = 0

    try:
        store.insert_admin(Admin(
            admin_id=DEMO_ADMIN_ID,
            password_hash=generate_password_hash(DEMO_ADMIN_PASSWORD),
            name='Demo Administrator',
        ))
    except DuplicateKeyError:
        logger.info(f"Admin '{DEMO_ADMIN_ID}' already exists")

    for student in students:
        try:
            store.insert_student(student)
            added += 1
        except DuplicateKeyError:
            duplicates += 1

    return added, duplicates


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    store = SQLiteRecordStore(Config.DATABASE)
    store.init_db()
    try:
        added, duplicates = seed_store(store, create_demo_students())
    finally:
        store.close()

    logger.info(f"Seeded {Config.DATABASE}: {added} students added ({duplicates} duplicates skipped)")
    logger.info(f"Demo admin login: {DEMO_ADMIN_ID} / {DEMO_ADMIN_PASSWORD}")
