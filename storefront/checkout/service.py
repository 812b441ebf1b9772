"""
storefront/checkout/service.py
------------------------------
Checkout orchestration.

Flow
────
1. Resolve the optional session token to a user id (guests stay None).
2. Build the provider preference from the cart.
3. Ask the provider to create it. On failure nothing is written.
4. Persist the order as pending, keyed by the preference id.
5. Hand back the provider's redirect URL.

An order row therefore always has a matching provider preference.
The caller's total is stored as sent; a mismatch with the item sum is
only logged.
"""
import time
from decimal import Decimal
from typing import Optional

from flask import current_app

from storefront import db
from storefront.auth.models import User
from storefront.auth.service import resolve_session
from storefront.checkout.models import Order, ORDER_STATUS_PENDING
from storefront.errors import PaymentProviderError


def get_gateway():
    return current_app.extensions['payment_gateway']


def build_preference(items: list) -> dict:
    """Map cart lines to the provider's preference payload."""
    cfg = current_app.config
    return {
        'items': [
            {
                'title':       item['name'],
                'unit_price':  float(item['price']),
                'quantity':    int(item['quantity']),
                'currency_id': cfg['CHECKOUT_CURRENCY'],
            }
            for item in items
        ],
        'back_urls': {
            'success': cfg['CHECKOUT_SUCCESS_URL'],
            'failure': cfg['CHECKOUT_FAILURE_URL'],
            'pending': cfg['CHECKOUT_PENDING_URL'],
        },
        'auto_return': 'approved',
    }


def _items_total(items: list) -> Decimal:
    return sum(
        (Decimal(str(i['price'])) * i['quantity'] for i in items),
        Decimal('0.00'),
    ).quantize(Decimal('0.01'))


def checkout(items: list, total, token: Optional[str] = None) -> dict:
    """
    Place an order for ``items`` (already normalised by parse_cart).

    Raises:
        PaymentProviderError: the provider call failed; no order was saved.

    Returns:
        {id, url}
    """
    user_id = resolve_session(token)

    total = Decimal(str(total)).quantize(Decimal('0.01'))
    computed = _items_total(items)
    if computed != total:
        current_app.logger.warning(
            f"Checkout total mismatch: client sent {total}, items sum {computed}"
        )

    preference = build_preference(items)
    result = get_gateway().create_preference(preference)

    url = result.url_for(current_app.config['MERCADOPAGO_SANDBOX'])
    if not url:
        current_app.logger.error(f"Payment provider returned no redirect URL (preference {result.id})")
        raise PaymentProviderError()

    order = Order(
        id=result.id or str(int(time.time() * 1000)),
        user_id=user_id,
        total=total,
        status=ORDER_STATUS_PENDING,
    )
    order.items_list = items
    db.session.add(order)
    db.session.commit()

    current_app.logger.info(
        f"Order {order.id} created ({'user ' + str(user_id) if user_id else 'guest'}, total {total})"
    )
    return {'id': order.id, 'url': url}


def list_orders() -> list:
    """Orders newest first, with the buyer's name and code (None for guests)."""
    tz_name = current_app.config['DISPLAY_TIMEZONE']
    rows = (
        db.session.query(Order, User.name, User.code)
        .outerjoin(User, Order.user_id == User.id)
        .order_by(Order.created_at.desc())
        .all()
    )
    result = []
    for order, user_name, user_code in rows:
        data = order.to_dict(tz_name)
        data['user_name'] = user_name
        data['user_code'] = user_code
        result.append(data)
    return result
