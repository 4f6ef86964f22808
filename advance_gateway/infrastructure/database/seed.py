"""
Seed demo applications, one per lifecycle status, for every existing user.

Usage:
    python -m advance_gateway.infrastructure.database.seed
"""

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from advance_gateway.config import settings
from advance_gateway.domain.lifecycle import ApplicationStatus
from advance_gateway.infrastructure.database.models import Application
from advance_gateway.infrastructure.database.repositories import UserRepository
from advance_gateway.infrastructure.database.session import Database
from advance_gateway.infrastructure.observability.logging import setup_logging
from advance_gateway.utils.date_utils import utcnow

logger = logging.getLogger(__name__)

SEED_APPROVER = "System Admin"


def _sample_applications(user_id, now: datetime):
    def days_ago(days: int) -> datetime:
        return now - timedelta(days=days)

    return [
        Application(
            user_id=user_id,
            amount=Decimal("500.00"),
            purpose="Emergency car repair",
            status=ApplicationStatus.PENDING,
            express_delivery=False,
            tip=Decimal("0.00"),
        ),
        Application(
            user_id=user_id,
            amount=Decimal("750.00"),
            purpose="Medical expenses",
            status=ApplicationStatus.APPROVED,
            express_delivery=True,
            tip=Decimal("15.00"),
            approved_at=days_ago(3),
            approved_by=SEED_APPROVER,
        ),
        Application(
            user_id=user_id,
            amount=Decimal("1000.00"),
            purpose="Rent payment",
            status=ApplicationStatus.DISBURSED,
            express_delivery=False,
            tip=Decimal("20.00"),
            approved_at=days_ago(10),
            approved_by=SEED_APPROVER,
            disbursed_amount=Decimal("1000.00"),
            disbursement_date=days_ago(9),
        ),
        Application(
            user_id=user_id,
            amount=Decimal("300.00"),
            purpose="Utility bills",
            status=ApplicationStatus.REPAID,
            express_delivery=False,
            tip=Decimal("5.00"),
            approved_at=days_ago(30),
            approved_by=SEED_APPROVER,
            disbursed_amount=Decimal("300.00"),
            disbursement_date=days_ago(29),
            repaid_amount=Decimal("300.00"),
            repayment_date=days_ago(15),
        ),
        Application(
            user_id=user_id,
            amount=Decimal("250.00"),
            purpose="Travel expenses",
            status=ApplicationStatus.CANCELLED,
            express_delivery=False,
            tip=Decimal("0.00"),
        ),
    ]


def seed_applications(db: Session, now: Optional[datetime] = None) -> int:
    """
    Insert sample applications for every user.

    Skipped entirely when any application already exists.

    Returns:
        Number of applications created
    """
    existing = db.query(Application).count()
    if existing:
        logger.info("Applications already exist, skipping seed", extra={"existing": existing})
        return 0

    users = UserRepository(db).list_all()
    if not users:
        logger.info("No users found, register users before seeding")
        return 0

    now = now or utcnow()
    created = 0
    for user in users:
        samples = _sample_applications(user.id, now)
        db.add_all(samples)
        created += len(samples)
    db.commit()

    logger.info("Seeded sample applications", extra={"created": created})
    return created


def main() -> None:
    setup_logging(settings.log_level, settings.service_name)
    database = Database(settings.database_url, echo=settings.db_echo)
    try:
        database.create_all()
        db = database.session()
        try:
            seed_applications(db)
        finally:
            db.close()
    finally:
        database.dispose()


if __name__ == "__main__":
    main()
