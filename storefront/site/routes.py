"""
storefront/site/routes.py
─────────────────────────
Storefront pages, uploaded files, banner setting and health check.
"""
from datetime import datetime

from flask import current_app, jsonify, request, send_from_directory
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from storefront import db
from storefront.site import site
from storefront.site.models import SiteConfig, BANNER_KEY
from storefront.auth.decorators import admin_required
from storefront.errors import NoImageProvided
from storefront.utils.uploads import save_image


@site.route('/')
def index():
    """Storefront home page (index.html under STATIC_ROOT)."""
    return current_app.send_static_file('index.html')


@site.route('/uploads/<path:filename>')
def uploaded_file(filename):
    return send_from_directory(current_app.config['UPLOAD_FOLDER'], filename)


# ── BANNER ────────────────────────────────────────────────────────────────────

@site.route('/api/config/banner', methods=['GET'])
def get_banner():
    return jsonify({'image': SiteConfig.get_value(BANNER_KEY)})


@site.route('/api/config/banner', methods=['POST'])
@admin_required
def set_banner():
    """Replace the storefront banner with the uploaded image."""
    image = request.files.get('image')
    if image is None or not image.filename:
        raise NoImageProvided()

    path = save_image(image)
    SiteConfig.set_value(BANNER_KEY, path)
    db.session.commit()
    current_app.logger.info(f"Banner updated: {path}")
    return jsonify({'message': 'Banner atualizado!', 'image': path})


# ── HEALTH ────────────────────────────────────────────────────────────────────

@site.route('/health')
def health():
    """Health check for load balancers and monitoring."""
    status = "ok"
    failures = []

    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        db.session.rollback()
        status = "error"
        failures.append(f"DB: {e}")
        current_app.logger.error(f"Health check failed (DB): {e}")

    response = {
        "status": status,
        "timestamp": datetime.utcnow().isoformat(),
        "details": {"db": "ok" if status == "ok" else "error"},
    }
    if failures:
        response["failures"] = failures

    return response, 200 if status == "ok" else 500
