"""Account Validator backed by a balance store"""

import logging
from decimal import Decimal

from payment_processor.domain.models import AccountValidation, BalanceCheck
from payment_processor.infrastructure.accounts.store import AccountStore


class AccountService:
    """Validates accounts, checks balances and moves funds"""

    def __init__(self, store: AccountStore):
        self.store = store

    async def validate_account(self, account_number: str) -> AccountValidation:
        logging.info("Validating account", extra={"account_number": account_number})
        balance = self.store.get_balance(account_number)

        if balance is None:
            logging.warning("Account validation failed", extra={"account_number": account_number})
            return AccountValidation(
                account_number=account_number,
                valid=False,
                message="Invalid account number",
            )

        return AccountValidation(
            account_number=account_number,
            valid=True,
            message="Account is valid",
            available_balance=balance,
        )

    async def check_balance(self, account_number: str, amount: Decimal) -> BalanceCheck:
        logging.info(
            "Checking balance",
            extra={"account_number": account_number, "amount": str(amount)},
        )
        balance = self.store.get_balance(account_number)

        if balance is None:
            return BalanceCheck(
                account_number=account_number,
                valid=False,
                sufficient_balance=False,
                message="Invalid account number",
            )

        if balance >= amount:
            return BalanceCheck(
                account_number=account_number,
                valid=True,
                sufficient_balance=True,
                message="Sufficient balance available",
                available_balance=balance,
            )

        logging.warning(
            "Insufficient balance",
            extra={"account_number": account_number, "available": str(balance), "required": str(amount)},
        )
        return BalanceCheck(
            account_number=account_number,
            valid=True,
            sufficient_balance=False,
            message=f"Insufficient balance. Available: {balance}, Required: {amount}",
            available_balance=balance,
        )

    async def transfer(self, from_account: str, to_account: str, amount: Decimal) -> None:
        """Debit and credit as one ledger operation"""
        logging.info(
            "Moving funds",
            extra={"from_account": from_account, "to_account": to_account, "amount": str(amount)},
        )
        self.store.transfer(from_account, to_account, amount)

    async def reverse_transfer(self, from_account: str, to_account: str, amount: Decimal) -> None:
        """Undo a transfer that did not reach a committed COMPLETED status"""
        logging.warning(
            "Reversing funds movement",
            extra={"from_account": from_account, "to_account": to_account, "amount": str(amount)},
        )
        self.store.transfer(to_account, from_account, amount)
