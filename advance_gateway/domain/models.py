"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict


@dataclass
class PortfolioSummary:
    """Aggregate view over one user's applications"""

    counts: Dict[str, int]
    total_applications: int
    outstanding_amount: Decimal
    repaid_amount: Decimal
    credit_limit: Decimal
    available_credit: Decimal


@dataclass
class LedgerEvent:
    """Outbound notification describing a posted ledger transaction"""

    event: str  # "ADVANCE_DISBURSED" or "ADVANCE_REPAID"
    application_id: str
    transaction_id: str
    user_id: str
    amount: Decimal

    def to_payload(self) -> Dict[str, str]:
        return {
            "event": self.event,
            "application_id": self.application_id,
            "transaction_id": self.transaction_id,
            "user_id": self.user_id,
            "amount": str(self.amount),
        }
