import os
import time
import logging
from typing import Optional

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from errors import UnsupportedPhotoError

ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}
URL_PREFIX = '/uploads'


def allowed_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


class PhotoStorage:
    """
    Keeps uploaded student photos on local disk.

    Files are stored as <unix millis>-<sanitised original name> and handed
    back as a /uploads/... reference that the app serves as static content.
    """

    def __init__(self, upload_folder: str):
        self.logger = logging.getLogger(__name__)
        self.upload_folder = upload_folder
        os.makedirs(upload_folder, exist_ok=True)

    def check(self, upload: Optional[FileStorage]) -> None:
        """Reject uploads we would refuse to store, without touching the disk."""
        if upload is None or not upload.filename:
            return
        if not allowed_file(secure_filename(upload.filename)):
            raise UnsupportedPhotoError()

    def save(self, upload: FileStorage) -> str:
        self.check(upload)
        filename = f"{int(time.time() * 1000)}-{secure_filename(upload.filename)}"
        filepath = os.path.join(self.upload_folder, filename)
        upload.save(filepath)
        self.logger.info(f"Stored photo {filepath}")
        return f"{URL_PREFIX}/{filename}"

    def discard(self, photo_url: str) -> None:
        """Remove a photo stored by save(); unknown references are ignored."""
        if not photo_url or not photo_url.startswith(URL_PREFIX + '/'):
            return
        filename = secure_filename(photo_url[len(URL_PREFIX) + 1:])
        filepath = os.path.join(self.upload_folder, filename)
        try:
            os.remove(filepath)
            self.logger.info(f"Discarded photo {filepath}")
        except FileNotFoundError:
            pass
