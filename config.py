"""
Configuration settings for the student records backend.
Each value can be overridden through an environment variable, usually of the
same name; SECRET_KEY reads SESSION_SECRET and DEBUG reads FLASK_DEBUG.
"""
import os


class Config:
    SECRET_KEY = os.environ.get("SESSION_SECRET", "dev-secret-key-change-in-production")

    # Storage
    DATABASE = os.environ.get("DATABASE", "student_records.sqlite")
    UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER", "uploads")
    EXPORT_FOLDER = os.environ.get("EXPORT_FOLDER", "exports")
    MAX_CONTENT_LENGTH = int(os.environ.get("MAX_CONTENT_LENGTH", 16 * 1024 * 1024))  # 16MB max upload

    # Server
    HOST = os.environ.get("HOST", "0.0.0.0")
    PORT = int(os.environ.get("PORT", 5000))
    DEBUG = os.environ.get("FLASK_DEBUG", "0") == "1"
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
