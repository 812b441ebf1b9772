"""
storefront/utils/codes.py
-------------------------
Human-readable identifiers shown to customers and admins.

Format:  <PREFIX>-XXXXXX   (uppercase letters and digits)
Example: PROD-AB12CD, USR-9K2M4Q

The numeric primary key stays the storage identity; the code is only
for display, so collisions are handled by the UNIQUE constraint on the
column and a retry in the caller.
"""
import secrets
import string

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 6


def generate_code(prefix: str, length: int = CODE_LENGTH) -> str:
    """Return e.g. ``PROD-AB12CD`` for prefix ``PROD``."""
    suffix = ''.join(secrets.choice(CODE_ALPHABET) for _ in range(length))
    return f'{prefix}-{suffix}'


def unique_code(model, prefix: str, attempts: int = 5) -> str:
    """
    Generate a code that is not yet used by ``model.code``.
    36^6 combinations make a clash unlikely; a few attempts are enough.
    """
    for _ in range(attempts):
        code = generate_code(prefix)
        if model.query.filter_by(code=code).first() is None:
            return code
    raise RuntimeError(f'Could not generate a unique {prefix} code')
