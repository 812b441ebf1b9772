from datetime import datetime
from storefront import db


class Product(db.Model):
    """A product in the storefront catalog."""
    __tablename__ = 'products'

    id          = db.Column(db.Integer, primary_key=True)
    code        = db.Column(db.String(20), unique=True, nullable=False, index=True)
    name        = db.Column(db.String(200), nullable=False)
    price       = db.Column(db.Numeric(10, 2), nullable=False)
    description = db.Column(db.Text, nullable=False, default='')
    image       = db.Column(db.String(255), nullable=False, default='')   # /uploads/... or ''
    created_at  = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            'id':          self.id,
            'code':        self.code,
            'name':        self.name,
            'price':       float(self.price),
            'description': self.description,
            'image':       self.image,
        }

    def __repr__(self):
        return f"<Product {self.code!r} {self.name!r}>"
