# passguard/models/account_meta.py
"""Per-account key/value metadata"""
from passguard.extensions import db


class AccountMeta(db.Model):
    """Single scalar value per (account, key)"""
    __tablename__ = 'account_meta'
    __table_args__ = (
        db.UniqueConstraint('account_id', 'meta_key', name='uq_account_meta_key'),
    )

    id = db.Column(db.Integer, primary_key=True)
    account_id = db.Column(db.Integer, db.ForeignKey('accounts.id', ondelete='CASCADE'),
                           nullable=False, index=True)
    meta_key = db.Column(db.String(64), nullable=False)
    meta_value = db.Column(db.Text, nullable=True)

    def __repr__(self):
        return f'<AccountMeta account_id={self.account_id} {self.meta_key}={self.meta_value}>'

    @classmethod
    def lookup(cls, account_id, key):
        return cls.query.filter_by(account_id=account_id, meta_key=key).first()

    @classmethod
    def get_value(cls, account_id, key, default=None):
        row = cls.lookup(account_id, key)
        if row is None or row.meta_value in (None, ''):
            return default
        return row.meta_value

    @classmethod
    def set_value(cls, account_id, key, value):
        """Insert or overwrite a value; the caller commits"""
        row = cls.lookup(account_id, key)
        if row is None:
            row = cls(account_id=account_id, meta_key=key)
            db.session.add(row)
        row.meta_value = str(value)
        return row
