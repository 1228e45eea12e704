# passguard/models/option.py
"""Process-wide named options"""
import json
from datetime import datetime
from passguard.extensions import db


class Option(db.Model):
    """
    Application-wide setting stored as a JSON document under a unique name.
    The password policy keeps its whole settings record in one option.
    """
    __tablename__ = 'options'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, unique=True, index=True)
    value = db.Column(db.Text, nullable=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<Option {self.name}>'

    def get_typed_value(self):
        """Decode the stored JSON, None when empty or unreadable"""
        if self.value is None:
            return None
        try:
            return json.loads(self.value)
        except (json.JSONDecodeError, TypeError):
            return None

    @staticmethod
    def get_option(name, default=None):
        option = Option.query.filter_by(name=name).first()
        if option is None:
            return default
        value = option.get_typed_value()
        return default if value is None else value

    @staticmethod
    def set_option(name, value):
        """Insert or overwrite an option; the caller commits"""
        option = Option.query.filter_by(name=name).first()
        if option is None:
            option = Option(name=name)
            db.session.add(option)
        option.value = json.dumps(value)
        return option
