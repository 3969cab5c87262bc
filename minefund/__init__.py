"""minefund - ledger, investment plans and multi-level referral commissions."""

__version__ = "0.1.0"
