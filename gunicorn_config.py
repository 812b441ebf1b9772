import multiprocessing
import os

# Gunicorn Production Configuration
# Usage: gunicorn -c gunicorn_config.py wsgi:app
bind = f"0.0.0.0:{os.environ.get('PORT', '3000')}"

# Workers: (2x CPU Count) + 1 is the official recommendation for typical IO-bound apps
workers = multiprocessing.cpu_count() * 2 + 1
threads = 2
worker_class = 'gthread'

# Checkout waits on the payment provider; keep the worker timeout above
# PAYMENT_PROVIDER_TIMEOUT.
timeout = 60
max_requests = 1000
max_requests_jitter = 100
keepalive = 5

# Logging
accesslog = '-'       # Stdout
errorlog = '-'        # Stderr
loglevel = 'info'
capture_output = True
