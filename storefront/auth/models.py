from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash
from storefront import db

# Known roles. The column itself is free text: roles set through the
# admin API are stored verbatim.
ROLE_USER  = 'user'
ROLE_ADMIN = 'admin'


class User(db.Model):
    """A store account (customer or admin)."""
    __tablename__ = 'users'

    id            = db.Column(db.Integer, primary_key=True)
    code          = db.Column(db.String(20), unique=True, nullable=False, index=True)
    name          = db.Column(db.String(120), nullable=False)
    email         = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)
    role          = db.Column(db.String(30), nullable=False, default=ROLE_USER)
    created_at    = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    # ── Relationships ─────────────────────────────────────────────
    # Sessions die with the user; orders survive with user_id = NULL
    # (SQLAlchemy nulls the FK of non-cascaded children on delete).
    sessions = db.relationship('UserSession', backref='user', lazy='select',
                               cascade='all, delete-orphan')
    orders   = db.relationship('Order', backref='user', lazy='select')

    # ── Password helpers ──────────────────────────────────────────
    def set_password(self, plain_password: str) -> None:
        """Hash and store the password. Never stores plain text."""
        self.password_hash = generate_password_hash(plain_password)

    def check_password(self, plain_password: str) -> bool:
        """Return True if the supplied password matches the stored hash."""
        return check_password_hash(self.password_hash, plain_password)

    # ── Convenience ───────────────────────────────────────────────
    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def to_dict(self) -> dict:
        """Public representation, the password hash is never included."""
        return {
            'id':    self.id,
            'code':  self.code,
            'name':  self.name,
            'email': self.email,
            'role':  self.role,
        }

    def __repr__(self) -> str:
        return f"<User {self.email!r} role={self.role!r}>"


class UserSession(db.Model):
    """
    An issued login token.
    One user may hold many concurrent sessions; each one expires on its own
    and can be revoked explicitly (logout).
    """
    __tablename__ = 'sessions'

    token      = db.Column(db.String(64), primary_key=True)
    user_id    = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'),
                           nullable=False, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    expires_at = db.Column(db.DateTime, nullable=False, index=True)
    revoked_at = db.Column(db.DateTime, nullable=True)

    def is_active(self, now: datetime = None) -> bool:
        now = now or datetime.utcnow()
        return self.revoked_at is None and self.expires_at > now

    def __repr__(self) -> str:
        return f"<UserSession user={self.user_id} expires={self.expires_at:%Y-%m-%d %H:%M}>"
