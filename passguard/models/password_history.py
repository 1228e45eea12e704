# passguard/models/password_history.py
"""Password History model for Passguard
Tracks previously used password hashes to enforce the non-reuse policy
"""
from datetime import datetime
from passguard.extensions import db


class PasswordHistory(db.Model):
    """
    One previously used password hash per row, oldest first by id
    Never stores plaintext
    """
    __tablename__ = 'password_history'

    id = db.Column(db.Integer, primary_key=True)
    account_id = db.Column(db.Integer, db.ForeignKey('accounts.id', ondelete='CASCADE'),
                           nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self):
        return f'<PasswordHistory account_id={self.account_id} created_at={self.created_at}>'

    @classmethod
    def hashes_for(cls, account_id):
        """Ordered list of stored hashes for an account"""
        rows = cls.query.filter_by(account_id=account_id).order_by(cls.id).all()
        return [row.password_hash for row in rows]

    @classmethod
    def trim(cls, account_id, keep):
        """Delete the oldest entries so that at most `keep` remain"""
        rows = cls.query.filter_by(account_id=account_id)\
                        .order_by(cls.id.desc())\
                        .offset(keep)\
                        .all()
        for row in rows:
            db.session.delete(row)
        return len(rows)
