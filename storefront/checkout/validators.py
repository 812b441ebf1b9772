"""
storefront/checkout/validators.py
---------------------------------
Shape checks for the cart posted to /api/checkout.
"""
from decimal import Decimal, InvalidOperation

CENT = Decimal('0.01')
# orders.total is Numeric(12,2)
MAX_AMOUNT = Decimal('1e10')


def _is_number(value) -> bool:
    """True for a finite amount that fits orders.total once rounded to cents."""
    if isinstance(value, bool):
        return False
    try:
        amount = Decimal(str(value)).quantize(CENT)
    except InvalidOperation:
        return False
    return amount.is_finite() and abs(amount) < MAX_AMOUNT


def validate_cart(items, total) -> dict:
    """Return {field: message}; empty when the cart can be sent to the provider."""
    errors = {}

    if not isinstance(items, list) or not items:
        errors['items'] = 'O carrinho está vazio.'
    else:
        for idx, item in enumerate(items):
            if not isinstance(item, dict):
                errors[f'items[{idx}]'] = 'Item inválido.'
                continue
            if not str(item.get('name') or '').strip():
                errors[f'items[{idx}].name'] = 'Nome do item é obrigatório.'
            if not _is_number(item.get('price')):
                errors[f'items[{idx}].price'] = 'Preço inválido.'
            qty = item.get('quantity', 1)
            if isinstance(qty, bool) or not isinstance(qty, int) or not 1 <= qty < MAX_AMOUNT:
                errors[f'items[{idx}].quantity'] = 'Quantidade deve ser um inteiro positivo.'

    if not _is_number(total):
        errors['total'] = 'Total inválido.'

    return errors


def parse_cart(items) -> list:
    """Normalise validated items to {name, price, quantity}."""
    return [
        {
            'name':     str(item['name']).strip(),
            'price':    float(Decimal(str(item['price'])).quantize(CENT)),
            'quantity': int(item.get('quantity', 1)),
        }
        for item in items
    ]
