"""Admin allowlist checks."""

import sys
from typing import Iterable, Optional

from fediring.domain.models import PermissionDenied
from fediring.ports.inbound import Account


def _log(msg: str):
    print(msg, file=sys.stderr)


class PermissionGate:
    """Decides whether an account may use admin-only commands.

    Pure predicate over the configured allowlist; an empty or missing list
    means nobody is an admin.
    """

    def __init__(self, admin_accounts: Optional[Iterable[str]] = None):
        self._admins = frozenset(admin_accounts or ())

    @property
    def admin_accounts(self) -> frozenset:
        return self._admins

    def is_admin(self, account: Account) -> bool:
        return account.acct in self._admins

    def require_admin(self, account: Account) -> None:
        if not self.is_admin(account):
            _log(f"[permissions] denied admin access for {account.acct}")
            raise PermissionDenied(account.acct)
