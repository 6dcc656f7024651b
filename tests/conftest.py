# tests/conftest.py

import io

import pytest
from werkzeug.datastructures import FileStorage

from app import create_app
from excel_handler import ExcelHandler
from photo_storage import PhotoStorage
from record_store import InMemoryRecordStore, SQLiteRecordStore
from records_manager import StudentRecordsManager


def _photo(filename="photo.png", content=b"\x89PNG fake image bytes"):
    return FileStorage(stream=io.BytesIO(content), filename=filename, content_type="image/png")


@pytest.fixture
def make_photo():
    return _photo


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    if request.param == "memory":
        yield InMemoryRecordStore()
    else:
        sqlite_store = SQLiteRecordStore(str(tmp_path / "records.sqlite"))
        sqlite_store.init_db()
        yield sqlite_store
        sqlite_store.close()


@pytest.fixture
def photo_storage(tmp_path):
    return PhotoStorage(str(tmp_path / "uploads"))


@pytest.fixture
def manager(store, photo_storage, tmp_path):
    return StudentRecordsManager(store, photo_storage, ExcelHandler(str(tmp_path / "exports")))


@pytest.fixture
def sample_student(manager):
    manager.add_student(
        "21CS001", "2003-04-15", "CSE", "Asha Rao", photo=_photo(), sem1="70,85,90"
    )
    return "21CS001"


@pytest.fixture
def app(tmp_path):
    return create_app({
        "TESTING": True,
        "DATABASE": str(tmp_path / "app.sqlite"),
        "UPLOAD_FOLDER": str(tmp_path / "uploads"),
        "EXPORT_FOLDER": str(tmp_path / "exports"),
    })


@pytest.fixture
def client(app):
    return app.test_client()
