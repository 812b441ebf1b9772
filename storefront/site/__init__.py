from flask import Blueprint

site = Blueprint('site', __name__)

from storefront.site import routes  # noqa: F401, E402
from storefront.site import models  # noqa: F401, E402: registers SiteConfig with SQLAlchemy
