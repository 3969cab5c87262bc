"""Balance ledger package."""

from minefund.services.ledger.balance_ledger import BalanceLedger

__all__ = ["BalanceLedger"]
