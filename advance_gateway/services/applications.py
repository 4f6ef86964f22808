"""Application lifecycle operations - guarded transitions over the repositories"""

import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from advance_gateway.config import Settings
from advance_gateway.domain.exceptions import DomainException, NotFoundError, PermissionDeniedError, ValidationError
from advance_gateway.domain.lifecycle import (
    Action,
    ApplicationStatus,
    TransactionType,
    check_transition,
    guard_error,
)
from advance_gateway.domain.models import LedgerEvent, PortfolioSummary
from advance_gateway.domain.summary import summarize_applications
from advance_gateway.infrastructure.database.models import Application, Transaction, User
from advance_gateway.infrastructure.database.repositories import ApplicationRepository, TransactionRepository
from advance_gateway.infrastructure.observability.logging import log_rejected_transition, log_transition
from advance_gateway.infrastructure.observability.metrics import record_amount, record_transition
from advance_gateway.utils.date_utils import utcnow
from advance_gateway.utils.money import to_money

# Fields a customer may edit while the application is PENDING
UPDATABLE_FIELDS = frozenset({"amount", "purpose", "express_delivery", "tip"})

DISBURSEMENT_DESCRIPTION = "Cash advance disbursement"
REPAYMENT_DESCRIPTION = "Cash advance repayment"


def parse_application_id(raw: str) -> uuid.UUID:
    """Malformed ids are reported exactly like unknown ones"""
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        raise NotFoundError("Application not found")


@dataclass
class PostedTransition:
    """Result of a transition that also wrote a ledger line"""

    application: Application
    transaction: Transaction
    event: LedgerEvent


class _LifecycleBase:
    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings
        self.applications = ApplicationRepository(db)
        self.transactions = TransactionRepository(db)

    def _apply(
        self,
        application: Application,
        owner_id: uuid.UUID,
        action: Action,
        values: Dict[str, Any],
    ) -> None:
        """
        Guard-then-write as one conditional update.

        The status check runs against the freshly read record, and the write
        repeats it in its WHERE clause. Nothing is written when either fails.
        """
        current = ApplicationStatus(application.status)
        try:
            target = check_transition(current, action)
        except DomainException:
            record_transition(action.value, ok=False)
            log_rejected_transition(str(application.id), str(owner_id), action.value, current.value)
            raise

        values = dict(values)
        if target is not current:
            values["status"] = target

        if values and not self.applications.compare_and_set(application.id, owner_id, current, values):
            # Status changed underneath us since the read
            self.db.rollback()
            record_transition(action.value, ok=False)
            log_rejected_transition(str(application.id), str(owner_id), action.value, current.value)
            raise guard_error(action)

        record_transition(action.value, ok=True)
        log_transition(str(application.id), str(owner_id), action.value, current.value, target.value)

    def _commit(self, *instances) -> None:
        self.db.commit()
        for instance in instances:
            self.db.refresh(instance)


class ApplicationService(_LifecycleBase):
    """Customer-facing operations; every call is scoped to the acting user"""

    def _get_owned(self, user: User, application_id: uuid.UUID) -> Application:
        application = self.applications.get_for_user(application_id, user.id)
        if application is None:
            raise NotFoundError("Application not found")
        return application

    def create(
        self,
        user: User,
        amount: Decimal,
        purpose: str,
        express_delivery: bool = False,
        tip: Optional[Decimal] = None,
    ) -> Application:
        """
        Create a PENDING application, then auto-approve it when enabled.

        Both writes commit together, so callers never observe the
        intermediate PENDING row while auto-approval is on.
        """
        application = self.applications.create_application(
            user_id=user.id,
            amount=to_money(amount),
            purpose=purpose,
            express_delivery=bool(express_delivery),
            tip=to_money(tip or 0),
        )
        record_amount("requested", application.amount)
        log_transition(str(application.id), str(user.id), "create", None, ApplicationStatus.PENDING.value)

        if self.settings.auto_approve:
            self._apply(
                application,
                user.id,
                Action.APPROVE,
                {"approved_at": utcnow(), "approved_by": self.settings.auto_approver_name},
            )

        self._commit(application)
        return application

    def list(self, user: User) -> List[Application]:
        return self.applications.list_for_user(user.id)

    def get(self, user: User, application_id: uuid.UUID) -> Application:
        return self._get_owned(user, application_id)

    def summary(self, user: User) -> PortfolioSummary:
        return summarize_applications(self.applications.list_for_user(user.id), self.settings.credit_limit)

    def update(self, user: User, application_id: uuid.UUID, changes: Dict[str, Any]) -> Application:
        """
        Edit a PENDING application.

        Raises:
            ValidationError: Unknown field, or the application is no longer PENDING
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        application = self._get_owned(user, application_id)
        values = dict(changes)
        for money_field in ("amount", "tip"):
            if money_field in values:
                values[money_field] = to_money(values[money_field])

        self._apply(application, user.id, Action.UPDATE, values)
        self._commit(application)
        return application

    def disburse(
        self,
        user: User,
        application_id: uuid.UUID,
        amount: Optional[Decimal] = None,
        express_delivery: Optional[bool] = None,
        tip: Optional[Decimal] = None,
    ) -> PostedTransition:
        """
        Release funds for an APPROVED application.

        `amount` defaults to the approved application amount. Delivery
        options, when given, replace the stored ones in the same write.
        """
        application = self._get_owned(user, application_id)
        disbursed = to_money(amount if amount is not None else application.amount)

        values: Dict[str, Any] = {"disbursed_amount": disbursed, "disbursement_date": utcnow()}
        if express_delivery is not None:
            values["express_delivery"] = express_delivery
        if tip is not None:
            values["tip"] = to_money(tip)

        self._apply(application, user.id, Action.DISBURSE, values)
        posted = self._post(application, disbursed, TransactionType.ADJUSTMENT, DISBURSEMENT_DESCRIPTION, "ADVANCE_DISBURSED")
        record_amount("disbursed", disbursed)
        return posted

    def repay(self, user: User, application_id: uuid.UUID, amount: Decimal) -> PostedTransition:
        """
        Settle a DISBURSED application.

        The first accepted repayment is a full settlement: the application
        moves to REPAID whatever the amount.
        """
        application = self._get_owned(user, application_id)
        repaid = to_money(amount)

        self._apply(
            application,
            user.id,
            Action.REPAY,
            {"repaid_amount": repaid, "repayment_date": utcnow()},
        )
        posted = self._post(application, repaid, TransactionType.PAYMENT, REPAYMENT_DESCRIPTION, "ADVANCE_REPAID")
        record_amount("repaid", repaid)
        return posted

    def cancel(self, user: User, application_id: uuid.UUID) -> Application:
        application = self._get_owned(user, application_id)
        self._apply(application, user.id, Action.CANCEL, {})
        self._commit(application)
        return application

    def list_transactions(self, user: User, application_id: Optional[uuid.UUID] = None) -> List[Transaction]:
        """The user's ledger lines, optionally narrowed to one owned application"""
        if application_id is None:
            return self.transactions.list_for_user(user.id)
        self._get_owned(user, application_id)
        return self.transactions.list_for_application(application_id, user.id)

    def _post(
        self,
        application: Application,
        amount: Decimal,
        type: TransactionType,
        description: str,
        event_name: str,
    ) -> PostedTransition:
        """Write the ledger line in the same database transaction as the status change"""
        transaction = self.transactions.create_transaction(
            user_id=application.user_id,
            application_id=application.id,
            amount=amount,
            type=type,
            description=description,
            reference=f"{event_name}:{application.id}",
        )
        self._commit(application, transaction)
        event = LedgerEvent(
            event=event_name,
            application_id=str(application.id),
            transaction_id=str(transaction.id),
            user_id=str(application.user_id),
            amount=amount,
        )
        return PostedTransition(application=application, transaction=transaction, event=event)


class ReviewService(_LifecycleBase):
    """Manual approve / reject of PENDING applications by an admin"""

    def _require_admin(self, user: User) -> None:
        if not user.is_admin:
            raise PermissionDeniedError("Admin privileges required")

    def _get(self, application_id: uuid.UUID) -> Application:
        application = self.applications.get_by_id(application_id)
        if application is None:
            raise NotFoundError("Application not found")
        return application

    def list_pending(self, admin: User) -> List[Application]:
        self._require_admin(admin)
        return self.applications.list_by_status(ApplicationStatus.PENDING)

    def approve(self, admin: User, application_id: uuid.UUID) -> Application:
        self._require_admin(admin)
        application = self._get(application_id)
        self._apply(
            application,
            application.user_id,
            Action.APPROVE,
            {"approved_at": utcnow(), "approved_by": admin.email},
        )
        self._commit(application)
        return application

    def reject(self, admin: User, application_id: uuid.UUID, reason: str) -> Application:
        self._require_admin(admin)
        application = self._get(application_id)
        self._apply(application, application.user_id, Action.REJECT, {"rejection_reason": reason})
        self._commit(application)
        return application
