from flask import Blueprint

catalog = Blueprint('catalog', __name__)

from storefront.catalog import routes  # noqa: F401, E402
from storefront.catalog import models  # noqa: F401, E402: registers Product with SQLAlchemy
