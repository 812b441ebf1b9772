import os

import click
from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from config import config

db = SQLAlchemy()


def create_app(config_name='default'):
    """Application factory: creates and configures the Flask app."""
    cfg = config[config_name]
    app = Flask(
        __name__,
        static_folder=cfg.STATIC_ROOT,
        static_url_path='',
    )
    app.config.from_object(cfg)

    # ── Logging ───────────────────────────────────────────────────
    from storefront.utils.logging import setup_logging
    setup_logging(app)

    # ── Extensions ────────────────────────────────────────────────
    db.init_app(app)

    from flask_cors import CORS
    CORS(app, resources={r'/api/*': {'origins': app.config['CORS_ORIGINS']}})

    from storefront.checkout.gateway import MercadoPagoGateway
    app.extensions['payment_gateway'] = MercadoPagoGateway(
        access_token=app.config['MERCADOPAGO_ACCESS_TOKEN'],
        base_url=app.config['MERCADOPAGO_API_URL'],
        timeout=app.config['PAYMENT_PROVIDER_TIMEOUT'],
    )

    os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)

    # ── Blueprints ────────────────────────────────────────────────
    from storefront.site import site as site_blueprint
    app.register_blueprint(site_blueprint)

    from storefront.auth import auth as auth_blueprint
    app.register_blueprint(auth_blueprint, url_prefix='/api')

    from storefront.catalog import catalog as catalog_blueprint
    app.register_blueprint(catalog_blueprint, url_prefix='/api')

    from storefront.checkout import checkout as checkout_blueprint
    app.register_blueprint(checkout_blueprint, url_prefix='/api')

    # ── Error Handlers ────────────────────────────────────────────
    from storefront.errors import register_error_handlers
    register_error_handlers(app)

    # ── CLI Commands ──────────────────────────────────────────────
    register_commands(app)

    # ── ProxyFix (HTTPS termination in front of gunicorn) ─────────
    from werkzeug.middleware.proxy_fix import ProxyFix
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    return app


def register_commands(app):
    """Register custom Flask CLI commands."""

    @app.cli.command('init-db')
    def init_db():
        """Create all database tables."""
        db.create_all()
        click.echo('✅  Database tables created.')

    @app.cli.command('seed-admin')
    @click.option('--name',     prompt='Full name', help='Admin full name')
    @click.option('--email',    prompt='E-mail',    help='Admin e-mail')
    @click.option('--password', prompt=True, hide_input=True,
                  confirmation_prompt=True, help='Admin password')
    def seed_admin(name, email, password):
        """Create an admin user (or promote an existing account)."""
        from storefront.auth.models import User, ROLE_ADMIN
        from storefront.auth.service import register_user, normalize_email

        existing = User.query.filter_by(email=normalize_email(email)).first()
        if existing:
            existing.role = ROLE_ADMIN
            db.session.commit()
            click.echo(f'ℹ️   "{email}" already exists, promoted to admin.')
            return

        result = register_user(name, email, password, role=ROLE_ADMIN)
        click.echo(f'✅  Admin user "{email}" created ({result["code"]}).')

    @app.cli.command('purge-sessions')
    def purge_sessions():
        """Delete expired and revoked session tokens."""
        from storefront.auth.service import purge_expired_sessions
        removed = purge_expired_sessions()
        click.echo(f'✅  {removed} session(s) removed.')

    @app.cli.command('seed-demo')
    def seed_demo():
        """Populate the catalog with the demo products."""
        from decimal import Decimal
        from storefront.catalog.models import Product
        from storefront.utils.codes import unique_code

        click.echo("🌱 Seeding demo data...")
        db.create_all()

        demo = [
            ("Scooter X13 Pro", "Urbana e rápida.", Decimal('4500.00')),
            ("E-Bike V10 Sport", "Potência total.", Decimal('6200.00')),
        ]
        for name, description, price in demo:
            if Product.query.filter_by(name=name).first():
                continue
            db.session.add(Product(
                code=unique_code(Product, 'PROD'),
                name=name,
                description=description,
                price=price,
                image='',
            ))
        db.session.commit()
        click.echo("✅ Demo seed complete.")
