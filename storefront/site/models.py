from typing import Optional

from storefront import db

BANNER_KEY = 'banner'


class SiteConfig(db.Model):
    """Key/value settings edited from the admin page."""
    __tablename__ = 'site_config'

    key   = db.Column(db.String(64), primary_key=True)
    value = db.Column(db.Text, nullable=False, default='')

    @classmethod
    def get_value(cls, key: str, default: str = '') -> str:
        row = db.session.get(cls, key)
        return row.value if row is not None else default

    @classmethod
    def set_value(cls, key: str, value: str) -> 'SiteConfig':
        """Insert or update ``key``. The caller commits."""
        row: Optional[SiteConfig] = db.session.get(cls, key)
        if row is None:
            row = cls(key=key, value=value)
            db.session.add(row)
        else:
            row.value = value
        return row

    def __repr__(self):
        return f"<SiteConfig {self.key}={self.value!r}>"
