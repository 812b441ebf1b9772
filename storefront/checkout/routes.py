from flask import jsonify

from storefront.checkout import checkout as checkout_bp
from storefront.checkout import service
from storefront.checkout.validators import validate_cart, parse_cart
from storefront.auth.decorators import admin_required, token_from_request
from storefront.errors import ValidationError
from storefront.utils.payload import request_data


@checkout_bp.route('/checkout', methods=['POST'])
def checkout():
    """
    Create the payment preference and a pending order.
    Body: {"items": [{name, price, quantity}], "total": 123.4, "token": "..."}
    The token is optional; guests can check out.
    """
    data = request_data()
    items = data.get('items', data.get('itens'))
    total = data.get('total')

    errors = validate_cart(items, total)
    if errors:
        raise ValidationError(errors)

    token = data.get('token') or token_from_request()
    result = service.checkout(parse_cart(items), total, token)
    return jsonify(result), 201


@checkout_bp.route('/pedidos', methods=['GET'])
@admin_required
def list_orders():
    return jsonify(service.list_orders())
