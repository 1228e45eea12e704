# passguard/services/stores.py
"""SQLAlchemy-backed host collaborators injected into the password policy

Writes are added to the shared database session; callers decide when to
commit, except for the bulk operations which commit their own pass.
"""
from typing import List, Optional

from passguard.extensions import db
from passguard.models.account import Account
from passguard.models.account_meta import AccountMeta
from passguard.models.audit_log import PolicyAuditLog
from passguard.models.option import Option
from passguard.models.password_history import PasswordHistory


class DatabaseStore:
    """Shared commit for stores writing through db.session"""

    def commit(self):
        db.session.commit()


class AccountDirectory(DatabaseStore):
    """Enumerate and look up accounts"""

    def all_ids(self) -> List[int]:
        return [row.id for row in db.session.query(Account.id).order_by(Account.id)]

    def get(self, account_id: int) -> Optional[Account]:
        return db.session.get(Account, account_id)

    def exists(self, account_id: int) -> bool:
        return self.get(account_id) is not None


class MetaStore(DatabaseStore):
    """Per-account scalar metadata"""

    def get(self, account_id: int, key: str) -> Optional[str]:
        return AccountMeta.get_value(account_id, key)

    def set(self, account_id: int, key: str, value) -> None:
        AccountMeta.set_value(account_id, key, value)

    def add(self, account_id: int, key: str, value) -> bool:
        """Set only when no value is stored yet; returns True if written"""
        if self.get(account_id, key) is not None:
            return False
        self.set(account_id, key, value)
        return True


class OptionStore(DatabaseStore):
    """Process-wide named options"""

    def get(self, name: str):
        return Option.get_option(name)

    def set(self, name: str, value) -> None:
        Option.set_option(name, value)

    def add(self, name: str, value) -> bool:
        if self.get(name) is not None:
            return False
        self.set(name, value)
        return True


class HistoryStore(DatabaseStore):
    """Ordered previous password hashes per account"""

    def list(self, account_id: int) -> List[str]:
        return PasswordHistory.hashes_for(account_id)

    def append(self, account_id: int, password_hash: str) -> None:
        db.session.add(PasswordHistory(account_id=account_id, password_hash=password_hash))
        db.session.flush()

    def trim(self, account_id: int, keep: int) -> int:
        return PasswordHistory.trim(account_id, keep)


class SessionRegistry(DatabaseStore):
    """Server-side session markers on the account rows"""

    def issue(self, account: Account) -> str:
        return account.generate_session_token()

    def destroy_all(self) -> int:
        """Invalidate every active session platform-wide and commit"""
        count = Account.query.filter(Account.session_token.isnot(None))\
                             .update({Account.session_token: None}, synchronize_session=False)
        db.session.commit()
        return count


class AuditTrail(DatabaseStore):
    """Audit records for administrative policy actions"""

    def record(self, action: str, actor_id: Optional[int] = None, details=None) -> None:
        PolicyAuditLog.record(action, actor_id=actor_id, details=details)
