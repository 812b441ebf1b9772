"""
storefront/auth/service.py
--------------------------
Identity & session management.

Sessions are opaque random tokens stored server-side. A token resolves to
its user while it is neither expired nor revoked; resolution never raises,
because checkout accepts anonymous (guest) orders.
"""
import logging
import uuid
from datetime import datetime
from typing import Optional

from flask import current_app
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from storefront import db
from storefront.auth.models import User, UserSession, ROLE_USER
from storefront.errors import DuplicateEmail, InvalidCredentials
from storefront.utils.codes import unique_code

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return (email or '').strip().lower()


# ── Sessions ──────────────────────────────────────────────────────

def issue_session(user: User) -> UserSession:
    """Create a new session for ``user``. Prior sessions stay valid."""
    now = datetime.utcnow()
    sess = UserSession(
        token=uuid.uuid4().hex,
        user_id=user.id,
        created_at=now,
        expires_at=now + current_app.config['SESSION_TOKEN_LIFETIME'],
    )
    db.session.add(sess)
    return sess


def resolve_session(token: Optional[str]) -> Optional[int]:
    """Return the user id bound to ``token``, or None for anonymous."""
    if not isinstance(token, str) or not token:
        return None
    sess = db.session.get(UserSession, token)
    if sess is None or not sess.is_active():
        return None
    return sess.user_id


def revoke_session(token: Optional[str]) -> bool:
    """Revoke a live session. Returns False if there was nothing to revoke."""
    if not isinstance(token, str) or not token:
        return False
    sess = db.session.get(UserSession, token)
    if sess is None or not sess.is_active():
        return False
    sess.revoked_at = datetime.utcnow()
    db.session.commit()
    logger.info("Session revoked for user %s", sess.user_id)
    return True


def purge_expired_sessions() -> int:
    """Delete expired and revoked sessions. Returns the number removed."""
    removed = (
        UserSession.query
        .filter(or_(UserSession.expires_at <= datetime.utcnow(),
                    UserSession.revoked_at.isnot(None)))
        .delete(synchronize_session=False)
    )
    db.session.commit()
    logger.info("Purged %s session(s)", removed)
    return removed


# ── Accounts ──────────────────────────────────────────────────────

def register_user(name: str, email: str, password: str, role: str = ROLE_USER) -> dict:
    """
    Create an account and log it in.

    Raises:
        DuplicateEmail: the e-mail is already registered.

    Returns:
        {token, name, code, role}
    """
    email = normalize_email(email)
    if User.query.filter_by(email=email).first():
        raise DuplicateEmail()

    user = User(name=name.strip(), email=email, role=role, code=unique_code(User, 'USR'))
    user.set_password(password)
    db.session.add(user)
    try:
        db.session.flush()  # get ID
    except IntegrityError:
        # Race condition: another request registered the same e-mail between
        # our check above and this flush.
        db.session.rollback()
        raise DuplicateEmail()

    sess = issue_session(user)
    db.session.commit()
    logger.info("New account registered: %s", user.code)
    return {'token': sess.token, 'name': user.name, 'code': user.code, 'role': user.role}


def authenticate(email: str, password: str) -> dict:
    """
    Check credentials and issue a new session.

    Raises:
        InvalidCredentials: unknown e-mail or wrong password (deliberately
        the same error for both).

    Returns:
        {token, name, role}
    """
    email = normalize_email(email)
    user = User.query.filter_by(email=email).first()
    if user is None or not user.check_password(password or ''):
        logger.warning("Failed login attempt for e-mail: %s", email)
        raise InvalidCredentials()

    sess = issue_session(user)
    db.session.commit()
    logger.info("User %s logged in successfully.", user.code)
    return {'token': sess.token, 'name': user.name, 'role': user.role}


def list_users() -> list:
    return [u.to_dict() for u in User.query.order_by(User.id.asc()).all()]


def set_role(user_id: int, role: str) -> Optional[User]:
    """Overwrite the role verbatim. Returns None if the user does not exist."""
    user = db.session.get(User, user_id)
    if user is None:
        return None
    old_role = user.role
    user.role = role
    db.session.commit()
    logger.info("Role of %s changed: %r -> %r", user.code, old_role, role)
    return user


def delete_user(user_id: int) -> bool:
    """
    Delete a user. Their sessions are deleted with them; their orders are
    kept with user_id set to NULL. Returns False if there was no such user.
    """
    user = db.session.get(User, user_id)
    if user is None:
        return False
    code = user.code
    db.session.delete(user)
    db.session.commit()
    logger.info("User deleted: %s", code)
    return True
