"""
Coins app services layer.

The ledger is the only code that writes CoinBalance or CoinTransaction rows.
"""

from .exceptions import (
    CoinsServiceError,
    InvalidAmountError,
    MissingFilterError,
    BalanceNotFoundError,
    InsufficientBalanceError,
    LedgerAccessDeniedError,
)

from .access import check_ledger_access

from .ledger import (
    credit,
    debit,
    record_debit,
    get_balance,
    get_balance_record,
    list_balances_for_user,
    list_transactions,
    reconcile_balance,
)


__all__ = [
    # Exceptions
    'CoinsServiceError',
    'InvalidAmountError',
    'MissingFilterError',
    'BalanceNotFoundError',
    'InsufficientBalanceError',
    'LedgerAccessDeniedError',

    # Access
    'check_ledger_access',

    # Ledger
    'credit',
    'debit',
    'record_debit',
    'get_balance',
    'get_balance_record',
    'list_balances_for_user',
    'list_transactions',
    'reconcile_balance',
]
