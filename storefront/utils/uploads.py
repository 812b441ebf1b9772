"""
storefront/utils/uploads.py
---------------------------
Stores an uploaded image under UPLOAD_FOLDER and returns the public path.
"""
import os
import time

from flask import current_app
from werkzeug.utils import secure_filename

from storefront.errors import ValidationError


def allowed_image(filename: str) -> bool:
    if '.' not in filename:
        return False
    ext = filename.rsplit('.', 1)[1].lower()
    return ext in current_app.config['ALLOWED_IMAGE_EXTENSIONS']


def save_image(file_storage) -> str:
    """
    Persist a werkzeug FileStorage and return its URL path (``/uploads/<name>``).
    The stored name is prefixed with a millisecond timestamp so two uploads
    of ``foto.jpg`` never overwrite each other.
    """
    original = secure_filename(file_storage.filename or '')
    if not original or not allowed_image(original):
        raise ValidationError({'image': 'Formato de imagem não suportado.'})

    filename = f'{int(time.time() * 1000)}-{original}'
    file_storage.save(os.path.join(current_app.config['UPLOAD_FOLDER'], filename))
    current_app.logger.info(f"Stored upload {filename}")
    return f'/uploads/{filename}'
