"""
storefront/catalog/validators.py
--------------------------------
Pure-Python validation for product data (JSON body or multipart form).
Returns a dict of field -> error_message.
An empty dict means all fields are valid.
"""
from decimal import Decimal, InvalidOperation

CENT = Decimal('0.01')
# products.price is Numeric(10,2)
MAX_PRICE = Decimal('1e8')


def validate_product_form(form_data: dict) -> dict:
    """
    Validate raw data for create product.

    Only presence and type are checked: the price has to parse as a number
    that fits products.price, its sign is stored as given.
    """
    errors = {}

    # ── name ─────────────────────────────────────────────────────
    name = str(form_data.get('name') or '').strip()
    if not name:
        errors['name'] = 'Nome do produto é obrigatório.'
    elif len(name) > 200:
        errors['name'] = 'Nome do produto deve ter até 200 caracteres.'

    # ── price ─────────────────────────────────────────────────────
    price_raw = str(form_data.get('price') or '').strip()
    if not price_raw:
        errors['price'] = 'Preço é obrigatório.'
    else:
        try:
            price = Decimal(price_raw.replace(',', '.')).quantize(CENT)
            if not price.is_finite() or abs(price) >= MAX_PRICE:
                errors['price'] = 'Preço deve ser um número válido.'
        except InvalidOperation:
            errors['price'] = 'Preço deve ser um número válido.'

    return errors


def parse_product_form(form_data: dict) -> dict:
    """
    Convert validated raw values to Python types.
    Call only after validate_product_form returns no errors.
    """
    price_raw = str(form_data.get('price')).strip().replace(',', '.')
    return {
        'name':        str(form_data.get('name')).strip(),
        'price':       Decimal(price_raw).quantize(CENT),
        'description': str(form_data.get('description') or '').strip(),
    }
