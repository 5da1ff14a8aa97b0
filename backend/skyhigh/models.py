from datetime import datetime, timezone

from skyhigh import db


def _utcnow():
    return datetime.now(timezone.utc)


class Wallet(db.Model):
    """Key/value row holding the persisted balance.

    The value is kept as text, the same way a browser key/value store
    would hold it, so a corrupted row can be detected and ignored.
    """
    __tablename__ = 'wallet'
    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(64), unique=True, nullable=False, index=True)
    value = db.Column(db.Text, nullable=True)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'key': self.key,
            'value': self.value,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
