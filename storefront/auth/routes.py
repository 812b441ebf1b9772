from flask import jsonify

from storefront.auth import auth
from storefront.auth import service
from storefront.auth.decorators import admin_required, token_from_request
from storefront.errors import ValidationError
from storefront.utils.payload import request_data


# ── REGISTER / LOGIN / LOGOUT ─────────────────────────────────────────────────

@auth.route('/register', methods=['POST'])
def register():
    """Create an account and return a fresh session token."""
    data = request_data(allow_form=True)
    name = str(data.get('name') or '').strip()
    email = str(data.get('email') or '').strip()
    password = data.get('password') or ''

    # Basic presence validation
    errors = {}
    if not name:
        errors['name'] = 'Nome é obrigatório.'
    if not email or '@' not in email:
        errors['email'] = 'E-mail inválido.'
    if not isinstance(password, str) or not password:
        errors['password'] = 'Senha é obrigatória.'
    if errors:
        raise ValidationError(errors)

    result = service.register_user(name, email, password)
    return jsonify(result), 201


@auth.route('/login', methods=['POST'])
def login():
    """Validate credentials and return a new session token."""
    data = request_data(allow_form=True)
    email = str(data.get('email') or '').strip()
    password = data.get('password') or ''

    if not email or not isinstance(password, str) or not password:
        raise ValidationError({'email': 'E-mail e senha são obrigatórios.'})

    return jsonify(service.authenticate(email, password))


@auth.route('/logout', methods=['POST'])
def logout():
    """Revoke the caller's session token."""
    data = request_data()
    token = data.get('token') or token_from_request()
    revoked = service.revoke_session(token)
    return jsonify({'revoked': revoked})


# ── USER ADMIN ────────────────────────────────────────────────────────────────

@auth.route('/users', methods=['GET'])
@admin_required
def users():
    return jsonify(service.list_users())


@auth.route('/users/<int:user_id>/role', methods=['PUT'])
@admin_required
def change_role(user_id):
    """Overwrite a user's role (stored as sent)."""
    data = request_data()
    role = data.get('role')
    if not isinstance(role, str) or not role:
        raise ValidationError({'role': 'Informe o novo papel.'})

    user = service.set_role(user_id, role)
    if user is None:
        return jsonify({'error': 'Usuário não encontrado.'}), 404
    return jsonify({'message': 'Papel atualizado!', 'user': user.to_dict()})


@auth.route('/users/<int:user_id>', methods=['DELETE'])
@admin_required
def delete_user(user_id):
    service.delete_user(user_id)
    return jsonify({'message': 'Usuário removido!'})
