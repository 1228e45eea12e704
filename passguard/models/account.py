# passguard/models/account.py
"""Account model for Passguard"""
import secrets
from datetime import datetime
from passguard.extensions import db


class Account(db.Model):
    """Host platform account holding the current credential hash"""
    __tablename__ = 'accounts'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    is_active = db.Column(db.Boolean, default=True)
    is_admin = db.Column(db.Boolean, default=False)

    # Server-side session marker; clearing it logs the account out everywhere
    session_token = db.Column(db.String(64), nullable=True, index=True)

    # Relationships
    password_history = db.relationship('PasswordHistory', backref='account',
                                       lazy=True, cascade='all, delete-orphan',
                                       order_by='PasswordHistory.id')
    meta = db.relationship('AccountMeta', backref='account',
                           lazy=True, cascade='all, delete-orphan')

    def __repr__(self):
        return f'<Account {self.username}>'

    def generate_session_token(self):
        """Start a new server-side session for this account"""
        self.session_token = secrets.token_hex(32)
        return self.session_token

    def validate_session_token(self, token):
        """Check the token stored in the client session against the current one"""
        if not self.session_token or not token:
            return False
        return secrets.compare_digest(self.session_token, token)

    def invalidate_session(self):
        self.session_token = None

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'is_active': self.is_active,
            'is_admin': self.is_admin,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
