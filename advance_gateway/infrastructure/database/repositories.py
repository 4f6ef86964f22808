"""Data access layer for users, applications and ledger transactions"""

import uuid
from decimal import Decimal
from typing import Any, Dict, List, Optional
from sqlalchemy import update
from sqlalchemy.orm import Session
from advance_gateway.infrastructure.database.models import Application, Transaction, User
from advance_gateway.domain.lifecycle import ApplicationStatus, TransactionStatus, TransactionType


class UserRepository:
    """Repository for users"""

    def __init__(self, db: Session):
        self.db = db

    def create_user(
        self,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
    ) -> User:
        user = User(
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
        )
        self.db.add(user)
        self.db.flush()
        return user

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def get_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        return self.db.get(User, user_id)

    def list_all(self) -> List[User]:
        return self.db.query(User).order_by(User.created_at).all()


class ApplicationRepository:
    """
    Repository for cash-advance applications.

    Every read or write made on behalf of a customer takes the acting
    user's id as a required argument and filters on it.
    """

    def __init__(self, db: Session):
        self.db = db

    def create_application(
        self,
        user_id: uuid.UUID,
        amount: Decimal,
        purpose: str,
        express_delivery: bool = False,
        tip: Decimal = Decimal("0"),
    ) -> Application:
        """Persist a new PENDING application"""
        application = Application(
            user_id=user_id,
            amount=amount,
            purpose=purpose,
            status=ApplicationStatus.PENDING,
            express_delivery=express_delivery,
            tip=tip,
        )
        self.db.add(application)
        self.db.flush()  # Get ID without committing
        return application

    def get_for_user(self, application_id: uuid.UUID, user_id: uuid.UUID) -> Optional[Application]:
        """Fetch an application only if `user_id` owns it"""
        return (
            self.db.query(Application)
            .filter(Application.id == application_id, Application.user_id == user_id)
            .first()
        )

    def list_for_user(self, user_id: uuid.UUID) -> List[Application]:
        """All of a user's applications, newest first"""
        return (
            self.db.query(Application)
            .filter(Application.user_id == user_id)
            .order_by(Application.created_at.desc())
            .all()
        )

    def get_by_id(self, application_id: uuid.UUID) -> Optional[Application]:
        """Unscoped lookup, reserved for admin review"""
        return self.db.get(Application, application_id)

    def list_by_status(self, status: ApplicationStatus) -> List[Application]:
        """Applications in `status` across all users, oldest first"""
        return (
            self.db.query(Application)
            .filter(Application.status == status)
            .order_by(Application.created_at.asc())
            .all()
        )

    def compare_and_set(
        self,
        application_id: uuid.UUID,
        user_id: uuid.UUID,
        expected_status: ApplicationStatus,
        values: Dict[str, Any],
    ) -> bool:
        """
        Conditionally update an application.

        The write only lands if the row is still owned by `user_id` and still
        in `expected_status`, so two concurrent transitions cannot both
        succeed from the same starting status.

        Returns:
            True if exactly one row was updated
        """
        result = self.db.execute(
            update(Application)
            .where(
                Application.id == application_id,
                Application.user_id == user_id,
                Application.status == expected_status,
            )
            .values(**values)
            .execution_options(synchronize_session="evaluate")
        )
        return result.rowcount == 1


class TransactionRepository:
    """Repository for ledger transactions"""

    def __init__(self, db: Session):
        self.db = db

    def create_transaction(
        self,
        user_id: uuid.UUID,
        amount: Decimal,
        type: TransactionType,
        application_id: Optional[uuid.UUID] = None,
        status: TransactionStatus = TransactionStatus.COMPLETED,
        description: Optional[str] = None,
        reference: Optional[str] = None,
    ) -> Transaction:
        transaction = Transaction(
            user_id=user_id,
            application_id=application_id,
            amount=amount,
            type=type,
            status=status,
            description=description,
            reference=reference,
        )
        self.db.add(transaction)
        self.db.flush()
        return transaction

    def list_for_user(self, user_id: uuid.UUID) -> List[Transaction]:
        """A user's ledger lines, newest first"""
        return (
            self.db.query(Transaction)
            .filter(Transaction.user_id == user_id)
            .order_by(Transaction.created_at.desc())
            .all()
        )

    def list_for_application(self, application_id: uuid.UUID, user_id: uuid.UUID) -> List[Transaction]:
        """Ledger lines of one application, oldest first, scoped to its owner"""
        return (
            self.db.query(Transaction)
            .filter(Transaction.application_id == application_id, Transaction.user_id == user_id)
            .order_by(Transaction.created_at.asc())
            .all()
        )
