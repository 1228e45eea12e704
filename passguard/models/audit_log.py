# passguard/models/audit_log.py
"""Policy audit log model for Passguard
Records administrative changes to the password policy
"""
import json
from datetime import datetime, timedelta
from passguard.extensions import db


class PolicyAuditLog(db.Model):
    """Audit trail entry for a policy settings change"""
    __tablename__ = 'policy_audit_log'

    id = db.Column(db.Integer, primary_key=True)
    actor_id = db.Column(db.Integer, db.ForeignKey('accounts.id', ondelete='SET NULL'), nullable=True)
    action = db.Column(db.String(64), nullable=False)
    details = db.Column(db.Text, nullable=True)  # JSON
    timestamp = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f'<PolicyAuditLog action={self.action} actor_id={self.actor_id} timestamp={self.timestamp}>'

    def get_details(self):
        if not self.details:
            return {}
        try:
            return json.loads(self.details)
        except (json.JSONDecodeError, TypeError):
            return {}

    def to_dict(self):
        return {
            'id': self.id,
            'actor_id': self.actor_id,
            'action': self.action,
            'details': self.get_details(),
            'timestamp': self.timestamp.isoformat() if self.timestamp else None,
        }

    @classmethod
    def record(cls, action, actor_id=None, details=None):
        """Add an entry to the session; the caller commits"""
        entry = cls(action=action, actor_id=actor_id,
                    details=json.dumps(details or {}, default=str))
        db.session.add(entry)
        return entry

    @classmethod
    def recent(cls, limit=50):
        return cls.query.order_by(cls.timestamp.desc(), cls.id.desc()).limit(limit).all()

    @classmethod
    def cleanup_old_logs(cls, days_to_keep=365):
        """Remove entries older than the retention window"""
        cutoff_date = datetime.utcnow() - timedelta(days=days_to_keep)
        deleted = cls.query.filter(cls.timestamp < cutoff_date).delete()
        db.session.commit()
        return deleted
