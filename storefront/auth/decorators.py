"""
storefront/auth/decorators.py
-----------------------------
Route-protection decorators for the JSON API.
Usage:
    from storefront.auth.decorators import admin_required

    @catalog.route('/produtos', methods=['POST'])
    @admin_required
    def create_product():
        ...

The session token is read from ``Authorization: Bearer <token>`` or the
``X-Session-Token`` header.
"""
from functools import wraps
from flask import current_app, g, request

from storefront import db
from storefront.errors import AdminRequired, AuthenticationRequired


def token_from_request():
    """Return the session token sent with the request, if any."""
    header = request.headers.get('Authorization', '')
    if header.lower().startswith('bearer '):
        return header[7:].strip() or None
    return request.headers.get('X-Session-Token') or None


def admin_required(f):
    """
    Allow access only to users with role == 'admin'.
    Only enforced when REQUIRE_ADMIN_TOKEN is on; otherwise the route stays
    open, as the storefront admin page expects.
    Unauthenticated callers get 401, authenticated non-admins get 403.
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        if not current_app.config.get('REQUIRE_ADMIN_TOKEN'):
            return f(*args, **kwargs)

        from storefront.auth.models import User
        from storefront.auth.service import resolve_session

        user_id = resolve_session(token_from_request())
        if user_id is None:
            raise AuthenticationRequired()
        user = db.session.get(User, user_id)
        if user is None or not user.is_admin:
            current_app.logger.warning(f"Non-admin access attempt on {request.path} (user {user_id})")
            raise AdminRequired()
        g.current_user = user
        return f(*args, **kwargs)
    return decorated
