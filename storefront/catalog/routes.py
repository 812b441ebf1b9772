from flask import jsonify, request, current_app

from storefront import db
from storefront.catalog import catalog
from storefront.catalog.models import Product
from storefront.catalog.validators import validate_product_form, parse_product_form
from storefront.auth.decorators import admin_required
from storefront.errors import ValidationError
from storefront.utils.codes import unique_code
from storefront.utils.payload import request_data
from storefront.utils.uploads import save_image


# ── LIST ──────────────────────────────────────────────────────────────────────

@catalog.route('/produtos', methods=['GET'])
def list_products():
    """All products, in storage order."""
    products = Product.query.order_by(Product.id.asc()).all()
    return jsonify([p.to_dict() for p in products])


# ── CREATE ────────────────────────────────────────────────────────────────────

@catalog.route('/produtos', methods=['POST'])
@admin_required
def create_product():
    """Create a product from a multipart form (with optional image) or JSON."""
    form_data = request_data(allow_form=True)
    errors = validate_product_form(form_data)
    if errors:
        raise ValidationError(errors)

    data = parse_product_form(form_data)
    image = request.files.get('image')
    data['image'] = save_image(image) if image and image.filename else ''

    product = Product(code=unique_code(Product, 'PROD'), **data)
    db.session.add(product)
    db.session.commit()

    current_app.logger.info(f"Admin created product: {product.name} ({product.code})")
    return jsonify({'message': 'Produto adicionado!', 'id': product.id, 'code': product.code}), 201


# ── DELETE ────────────────────────────────────────────────────────────────────

@catalog.route('/produtos/<int:product_id>', methods=['DELETE'])
@admin_required
def delete_product(product_id):
    """Delete a product. A missing id is not an error."""
    product = db.session.get(Product, product_id)
    if product is not None:
        name, code = product.name, product.code
        db.session.delete(product)
        db.session.commit()
        current_app.logger.info(f"Admin deleted product: {name} ({code})")
    return jsonify({'message': 'Produto removido!'})
