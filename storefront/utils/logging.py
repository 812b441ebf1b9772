"""
storefront/utils/logging.py
───────────────────────────
Configures request-aware logging for the API.
"""
import os
import logging
from logging.handlers import RotatingFileHandler
from flask import has_request_context, request
from flask.logging import default_handler


class RequestFormatter(logging.Formatter):
    """
    Formatter that injects the request method, URL and client address
    into every record when a request context is active.
    """
    def format(self, record):
        if has_request_context():
            record.method = request.method
            record.url = request.url
            record.remote_addr = request.remote_addr
        else:
            record.method = None
            record.url = None
            record.remote_addr = None
        return super().format(record)


FILE_HANDLER_NAME = 'storefront-file'
STREAM_HANDLER_NAME = 'storefront-stdout'


def setup_logging(app):
    """
    Configure rotating file logging: logs/app.log
    Max size: 5MB
    Backup count: 5 files
    Format: timestamp | level | module | client | method url | message

    Every app built in the process shares the ``storefront`` logger, so each
    handler is attached once.
    """
    app.logger.removeHandler(default_handler)
    installed = {h.name for h in app.logger.handlers}

    # 1. File Logger (skipped on a read-only filesystem)
    if not app.testing and FILE_HANDLER_NAME not in installed:
        try:
            log_dir = os.path.join(app.root_path, '..', 'logs')
            os.makedirs(log_dir, exist_ok=True)

            file_handler = RotatingFileHandler(
                os.path.join(log_dir, 'app.log'),
                maxBytes=5 * 1024 * 1024,
                backupCount=5
            )
            file_handler.set_name(FILE_HANDLER_NAME)
            file_handler.setFormatter(RequestFormatter(
                '%(asctime)s | %(levelname)s | %(name)s | %(remote_addr)s | %(method)s %(url)s | %(message)s'
            ))
            file_handler.setLevel(logging.INFO)
            app.logger.addHandler(file_handler)
        except OSError:
            pass  # stdout only

    # 2. Stdout Logger (picked up by gunicorn / container logs)
    if STREAM_HANDLER_NAME not in installed:
        stream_handler = logging.StreamHandler()
        stream_handler.set_name(STREAM_HANDLER_NAME)
        stream_handler.setFormatter(logging.Formatter(
            '%(asctime)s | %(levelname)s | %(message)s'
        ))
        stream_handler.setLevel(logging.INFO)
        app.logger.addHandler(stream_handler)

    app.logger.setLevel(logging.INFO)
    app.logger.info("Storefront API startup")
