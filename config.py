import os
import tempfile
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


def _flag(name, default):
    return os.environ.get(name, default).lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Base configuration shared across all environments."""
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_recycle": 300,
        "pool_pre_ping": True,
    }

    # Storefront / admin pages (index.html, admin.html, ...) are plain files
    # served from here; the repo ships a placeholder public/index.html
    STATIC_ROOT = os.environ.get('STATIC_ROOT', os.path.join(BASE_DIR, 'public'))
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER', os.path.join(BASE_DIR, 'uploads'))
    MAX_CONTENT_LENGTH = 8 * 1024 * 1024
    ALLOWED_IMAGE_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}

    # Session tokens expire after 8 hours (one work shift)
    SESSION_TOKEN_LIFETIME = timedelta(hours=8)
    # Admin API routes are open unless this is switched on
    REQUIRE_ADMIN_TOKEN = _flag('REQUIRE_ADMIN_TOKEN', 'False')

    # Payment provider (Mercado Pago checkout preferences)
    MERCADOPAGO_ACCESS_TOKEN = os.environ.get('MERCADOPAGO_ACCESS_TOKEN', '')
    MERCADOPAGO_API_URL = os.environ.get('MERCADOPAGO_API_URL', 'https://api.mercadopago.com')
    MERCADOPAGO_SANDBOX = _flag('MERCADOPAGO_SANDBOX', 'True')
    PAYMENT_PROVIDER_TIMEOUT = float(os.environ.get('PAYMENT_PROVIDER_TIMEOUT', '10'))

    CHECKOUT_CURRENCY = os.environ.get('CHECKOUT_CURRENCY', 'BRL')
    CHECKOUT_SUCCESS_URL = os.environ.get('CHECKOUT_SUCCESS_URL', 'http://localhost:3000/sucesso.html')
    CHECKOUT_FAILURE_URL = os.environ.get('CHECKOUT_FAILURE_URL', 'http://localhost:3000/falha.html')
    CHECKOUT_PENDING_URL = os.environ.get('CHECKOUT_PENDING_URL', 'http://localhost:3000/pendente.html')

    DISPLAY_TIMEZONE = os.environ.get('DISPLAY_TIMEZONE', 'America/Sao_Paulo')

    # Comma-separated list of origins allowed to call /api/*; '*' allows any
    CORS_ORIGINS = [o.strip() for o in os.environ.get('CORS_ORIGINS', '*').split(',') if o.strip()]


class DevelopmentConfig(Config):
    """Development environment configuration."""
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'DATABASE_URL',
        f'sqlite:///{os.path.join(BASE_DIR, "loja.db")}'
    )


class ProductionConfig(Config):
    """Production environment configuration."""
    DEBUG = False

    # Correct PostgreSQL scheme and accessing env var
    _db_url = os.environ.get('DATABASE_URL')
    if _db_url and _db_url.startswith('postgres://'):
        _db_url = _db_url.replace('postgres://', 'postgresql://', 1)

    SQLALCHEMY_DATABASE_URI = _db_url or f'sqlite:///{os.path.join(BASE_DIR, "loja.db")}'

    SECRET_KEY = os.environ.get('SECRET_KEY')
    MERCADOPAGO_SANDBOX = _flag('MERCADOPAGO_SANDBOX', 'False')


class TestingConfig(Config):
    """Testing environment configuration."""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}  # SQLite doesn't use the prod pool settings
    UPLOAD_FOLDER = os.path.join(tempfile.gettempdir(), 'storefront-test-uploads')
    REQUIRE_ADMIN_TOKEN = False
    MERCADOPAGO_ACCESS_TOKEN = 'TEST-token'
    MERCADOPAGO_SANDBOX = True


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
