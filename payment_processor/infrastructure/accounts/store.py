"""In-memory account ledger with per-account locking"""

import logging
import random
import re
import threading
from contextlib import ExitStack
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Dict, Optional, Protocol

from payment_processor.domain.exceptions import AccountServiceError, InsufficientFundsError

# Seed balances for the mock ledger
DEFAULT_BALANCES: Dict[str, Decimal] = {
    "ACC001": Decimal("100000.00"),
    "ACC002": Decimal("50000.00"),
    "ACC003": Decimal("25000.00"),
    "ACC004": Decimal("5000.00"),
    "ACC005": Decimal("1000.00"),
}

ACCOUNT_PATTERN = re.compile(r"^ACC\d{3,}$")
CENTS = Decimal("0.01")


class AccountStore(Protocol):
    """Balance store capability used by the account service"""

    def get_balance(self, account_number: str) -> Optional[Decimal]:
        ...

    def transfer(self, from_account: str, to_account: str, amount: Decimal) -> None:
        ...


def random_opening_balance(rng: random.Random | None = None) -> Callable[[], Decimal]:
    """Opening balance generator: uniform between 1,000 and 100,000"""
    rng = rng or random.Random()

    def _generate() -> Decimal:
        return Decimal(str(1000 + rng.random() * 99000)).quantize(CENTS, rounding=ROUND_HALF_UP)

    return _generate


class InMemoryAccountStore:
    """
    Mock ledger holding balances in process memory.

    Each account has its own lock. A transfer takes both locks in sorted
    account order, so the debit/credit pair is one critical section and two
    transfers touching the same account serialize without deadlocking.

    Accounts matching ACCnnn that are not seeded are opened on first access
    with a generated balance, which is stored so later reads agree.
    """

    def __init__(
        self,
        balances: Dict[str, Decimal] | None = None,
        auto_open: bool = True,
        opening_balance: Callable[[], Decimal] | None = None,
    ):
        self._seed = dict(DEFAULT_BALANCES if balances is None else balances)
        self._balances: Dict[str, Decimal] = dict(self._seed)
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()
        self.auto_open = auto_open
        self.opening_balance = opening_balance or random_opening_balance()

    def _lock_for(self, account_number: str) -> threading.Lock:
        with self._registry_lock:
            return self._locks.setdefault(account_number, threading.Lock())

    def _open_if_allowed(self, account_number: str) -> bool:
        """Called with the registry lock held"""
        if account_number in self._balances:
            return True
        if self.auto_open and ACCOUNT_PATTERN.match(account_number):
            self._balances[account_number] = self.opening_balance()
            logging.info(
                "Opened account on first use",
                extra={"account_number": account_number, "balance": str(self._balances[account_number])},
            )
            return True
        return False

    def exists(self, account_number: str) -> bool:
        if not account_number or not account_number.strip():
            return False
        with self._registry_lock:
            return self._open_if_allowed(account_number)

    def get_balance(self, account_number: str) -> Optional[Decimal]:
        """Available balance, or None when the account does not exist"""
        if not self.exists(account_number):
            return None
        with self._lock_for(account_number):
            return self._balances[account_number]

    def transfer(self, from_account: str, to_account: str, amount: Decimal) -> None:
        """
        Debit from_account and credit to_account as one operation.

        Funds are re-verified under the locks; a concurrent transfer may have
        drained the account since the balance check.

        Raises:
            AccountServiceError: either account does not exist
            InsufficientFundsError: balance no longer covers amount
        """
        if amount <= 0:
            raise AccountServiceError(f"Transfer amount must be positive, got {amount}")
        for account in (from_account, to_account):
            if not self.exists(account):
                raise AccountServiceError(f"Unknown account: {account}")

        with ExitStack() as stack:
            for account in sorted({from_account, to_account}):
                stack.enter_context(self._lock_for(account))

            available = self._balances[from_account]
            if available < amount:
                raise InsufficientFundsError(
                    f"Insufficient balance. Available: {available}, Required: {amount}"
                )
            self._balances[from_account] = available - amount
            self._balances[to_account] = self._balances[to_account] + amount

    def reset(self) -> None:
        """Restore seed balances"""
        logging.info("Resetting account balances to initial state")
        with self._registry_lock:
            self._balances = dict(self._seed)
