import os

from storefront import create_app, db

config_name = os.environ.get('FLASK_ENV', 'production')
app = create_app(config_name)

# ── Tables on startup ──
# The store has no migration tool; create_all() only adds missing tables.
with app.app_context():
    db.create_all()

if __name__ == "__main__":
    app.run(port=int(os.environ.get('PORT', '3000')))
