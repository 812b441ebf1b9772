from flask import Blueprint

checkout = Blueprint('checkout', __name__)

from storefront.checkout import routes  # noqa: F401, E402
from storefront.checkout import models  # noqa: F401, E402: registers Order with SQLAlchemy
