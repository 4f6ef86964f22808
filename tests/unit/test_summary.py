"""Unit tests for portfolio summary and money helpers"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from advance_gateway.domain.lifecycle import ApplicationStatus
from advance_gateway.domain.summary import remaining_amount, summarize_applications
from advance_gateway.utils.money import money_sum, to_money


@dataclass
class FakeApplication:
    status: ApplicationStatus
    disbursed_amount: Optional[Decimal] = None
    repaid_amount: Optional[Decimal] = None


def test_to_money_quantizes_to_cents():
    assert to_money(500) == Decimal("500.00")
    assert to_money("10.005") == Decimal("10.01")
    assert to_money(0.1) == Decimal("0.10")


def test_money_sum_skips_none():
    assert money_sum([Decimal("1.50"), None, Decimal("2.25")]) == Decimal("3.75")
    assert money_sum([]) == Decimal("0.00")


def test_remaining_amount_before_disbursement():
    assert remaining_amount(None, None) is None


def test_remaining_amount_partial_and_over_repayment():
    assert remaining_amount(Decimal("500"), None) == Decimal("500.00")
    assert remaining_amount(Decimal("500"), Decimal("100")) == Decimal("400.00")
    assert remaining_amount(Decimal("500"), Decimal("600")) == Decimal("0.00")


def test_repaid_application_owes_nothing():
    assert remaining_amount(Decimal("500"), Decimal("1"), ApplicationStatus.REPAID) == Decimal("0.00")
    assert remaining_amount(Decimal("500"), Decimal("1"), "REPAID") == Decimal("0.00")
    assert remaining_amount(Decimal("500"), None, ApplicationStatus.DISBURSED) == Decimal("500.00")


def test_summary_totals():
    """Outstanding from DISBURSED, repaid from REPAID, available = limit - outstanding"""
    applications = [
        FakeApplication(ApplicationStatus.APPROVED),
        FakeApplication(ApplicationStatus.DISBURSED, disbursed_amount=Decimal("1000")),
        FakeApplication(ApplicationStatus.DISBURSED, disbursed_amount=Decimal("250.50")),
        FakeApplication(ApplicationStatus.REPAID, disbursed_amount=Decimal("300"), repaid_amount=Decimal("300")),
        FakeApplication(ApplicationStatus.CANCELLED),
    ]

    summary = summarize_applications(applications, credit_limit=Decimal("5000"))

    assert summary.total_applications == 5
    assert summary.counts == {
        "PENDING": 0,
        "APPROVED": 1,
        "REJECTED": 0,
        "DISBURSED": 2,
        "REPAID": 1,
        "CANCELLED": 1,
    }
    assert summary.outstanding_amount == Decimal("1250.50")
    assert summary.repaid_amount == Decimal("300.00")
    assert summary.available_credit == Decimal("3749.50")


def test_summary_available_credit_never_negative():
    applications = [FakeApplication(ApplicationStatus.DISBURSED, disbursed_amount=Decimal("6000"))]
    summary = summarize_applications(applications, credit_limit=Decimal("5000"))
    assert summary.available_credit == Decimal("0.00")


def test_summary_empty():
    summary = summarize_applications([], credit_limit=Decimal("5000"))
    assert summary.total_applications == 0
    assert set(summary.counts.values()) == {0}
    assert summary.available_credit == Decimal("5000.00")
