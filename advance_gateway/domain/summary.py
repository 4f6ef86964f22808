"""Portfolio summary - per-user totals shown on the dashboard"""

from decimal import Decimal
from typing import Iterable, Optional

from advance_gateway.domain.lifecycle import ApplicationStatus
from advance_gateway.domain.models import PortfolioSummary
from advance_gateway.utils.money import ZERO, money_sum, to_money


def remaining_amount(
    disbursed_amount: Optional[Decimal],
    repaid_amount: Optional[Decimal],
    status: Optional[ApplicationStatus] = None,
) -> Optional[Decimal]:
    """
    Amount still owed on an application.

    None until something has been disbursed. A REPAID application is
    settled in full and owes nothing whatever was repaid. Never negative:
    an over-repayment settles to zero.
    """
    if disbursed_amount is None:
        return None
    if status is not None and ApplicationStatus(status) is ApplicationStatus.REPAID:
        return ZERO
    owed = to_money(disbursed_amount) - to_money(repaid_amount or 0)
    return max(owed, ZERO)


def summarize_applications(applications: Iterable, credit_limit: Decimal) -> PortfolioSummary:
    """
    Aggregate a user's applications.

    Requirements:
    - Count per status, every status present (zero when unused)
    - Outstanding = remaining amount across DISBURSED applications
    - Repaid = repaid amount across REPAID applications
    - Available credit = credit limit minus outstanding, floored at zero

    Args:
        applications: Objects exposing status, disbursed_amount and repaid_amount
        credit_limit: Ceiling used for the available-credit figure
    """
    applications = list(applications)
    counts = {status.value: 0 for status in ApplicationStatus}
    for app in applications:
        counts[ApplicationStatus(app.status).value] += 1

    outstanding = money_sum(
        remaining_amount(app.disbursed_amount, app.repaid_amount, app.status)
        for app in applications
        if app.status == ApplicationStatus.DISBURSED
    )
    repaid = money_sum(app.repaid_amount for app in applications if app.status == ApplicationStatus.REPAID)

    limit = to_money(credit_limit)
    return PortfolioSummary(
        counts=counts,
        total_applications=len(applications),
        outstanding_amount=outstanding,
        repaid_amount=repaid,
        credit_limit=limit,
        available_credit=max(limit - outstanding, ZERO),
    )
