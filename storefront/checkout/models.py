"""
storefront/checkout/models.py
-----------------------------
Order model.

Order.items is a JSON-encoded list, one entry per cart line:
  [{"name": "Scooter X13 Pro", "price": 4500.0, "quantity": 1}, ...]

The id is the payment provider's preference id, so an order can be matched
to the provider's records; it falls back to a millisecond timestamp when the
provider returns none.
"""
import json
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from storefront import db

ORDER_STATUS_PENDING = 'Pendente'

DISPLAY_FORMAT = '%d/%m/%Y %H:%M:%S'


def format_display_time(dt: datetime, tz_name: str) -> str:
    """Render a naive-UTC datetime in the store's timezone."""
    if not dt:
        return ''
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(ZoneInfo(tz_name)).strftime(DISPLAY_FORMAT)


class Order(db.Model):
    """A checkout attempt handed over to the payment provider."""
    __tablename__ = 'orders'

    id         = db.Column(db.String(100), primary_key=True)
    user_id    = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'),
                           nullable=True, index=True)
    items      = db.Column(db.Text, nullable=False, default='[]')   # JSON string
    total      = db.Column(db.Numeric(12, 2), nullable=False)
    status     = db.Column(db.String(30), nullable=False, default=ORDER_STATUS_PENDING)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)

    # ── Helpers ───────────────────────────────────────────────────

    @property
    def items_list(self) -> list:
        try:
            return json.loads(self.items or '[]')
        except (ValueError, TypeError):
            return []

    @items_list.setter
    def items_list(self, value: list):
        self.items = json.dumps(value)

    def to_dict(self, tz_name: str = 'UTC') -> dict:
        return {
            'id':         self.id,
            'user_id':    self.user_id,
            'created_at': format_display_time(self.created_at, tz_name),
            'items':      self.items_list,
            'total':      float(self.total),
            'status':     self.status,
        }

    def __repr__(self):
        return f"<Order {self.id!r} {self.status!r} {self.total}>"
