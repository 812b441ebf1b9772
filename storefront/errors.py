"""
storefront/errors.py
--------------------
Error taxonomy for the API and the handlers that turn it into JSON.

Every failure is caught at the request boundary and answered with
``{"error": "<message>"}`` and a 4xx/5xx status. Nothing is retried.
"""
from flask import jsonify, request
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException


class StorefrontError(Exception):
    """Base class; carries the HTTP status used at the request boundary."""
    status_code = 500
    message = 'Erro interno.'

    def __init__(self, message=None, status_code=None):
        super().__init__(message or self.message)
        if message is not None:
            self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        return {'error': self.message}


class ValidationError(StorefrontError):
    status_code = 400
    message = 'Dados inválidos.'

    def __init__(self, errors: dict, message=None):
        super().__init__(message)
        self.errors = errors

    def to_dict(self) -> dict:
        return {'error': self.message, 'errors': self.errors}


class DuplicateEmail(StorefrontError):
    status_code = 409
    message = 'E-mail já cadastrado.'


class InvalidCredentials(StorefrontError):
    status_code = 401
    message = 'E-mail ou senha inválidos.'


class AuthenticationRequired(StorefrontError):
    status_code = 401
    message = 'Sessão inválida ou expirada.'


class AdminRequired(StorefrontError):
    status_code = 403
    message = 'Acesso restrito a administradores.'


class NoImageProvided(StorefrontError):
    status_code = 400
    message = 'Nenhuma imagem enviada.'


class PaymentProviderError(StorefrontError):
    status_code = 502
    message = 'Erro ao criar pagamento.'


class StorageError(StorefrontError):
    status_code = 500
    message = 'Erro ao acessar o banco de dados.'


def register_error_handlers(app):
    from storefront import db

    @app.errorhandler(StorefrontError)
    def handle_storefront_error(e):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_storage_error(e):
        db.session.rollback()
        app.logger.exception(f"Storage failure on {request.method} {request.path}")
        err = StorageError()
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        # Non-API paths (static pages) keep werkzeug's default response
        if not request.path.startswith('/api'):
            return e
        return jsonify({'error': e.description}), e.code
