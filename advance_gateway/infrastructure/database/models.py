"""SQLAlchemy ORM models for users, applications and ledger transactions"""

import uuid
from datetime import timezone
from sqlalchemy import Column, String, Boolean, DateTime, Numeric, ForeignKey, Text, Enum, Uuid
from sqlalchemy.types import TypeDecorator
from sqlalchemy.orm import declarative_base, relationship

from advance_gateway.domain.lifecycle import ApplicationStatus, TransactionStatus, TransactionType, customer_actions
from advance_gateway.domain.summary import remaining_amount
from advance_gateway.utils.date_utils import utcnow

Base = declarative_base()

# Amounts are stored with two decimal places, up to 99,999,999.99
Money = Numeric(10, 2, asdecimal=True)


class UTCDateTime(TypeDecorator):
    """Timezone-aware UTC datetimes on every backend (SQLite drops the offset)"""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class User(Base):
    """Registered customer (or admin reviewer)"""

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone_number = Column(String(32), nullable=True)
    is_admin = Column(Boolean, nullable=False, default=False)
    is_verified = Column(Boolean, nullable=False, default=False)
    verification_token = Column(String(255), nullable=True)
    reset_password_token = Column(String(255), nullable=True)
    reset_password_expires = Column(UTCDateTime, nullable=True)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    applications = relationship("Application", back_populates="user")
    transactions = relationship("Transaction", back_populates="user")


class Application(Base):
    """Cash-advance request moving through the lifecycle state machine"""

    __tablename__ = "applications"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    amount = Column(Money, nullable=False)
    purpose = Column(Text, nullable=False)
    status = Column(
        Enum(ApplicationStatus, native_enum=False, length=16, validate_strings=True),
        nullable=False,
        default=ApplicationStatus.PENDING,
    )
    disbursed_amount = Column(Money, nullable=True)
    disbursement_date = Column(UTCDateTime, nullable=True)
    repaid_amount = Column(Money, nullable=True)
    repayment_date = Column(UTCDateTime, nullable=True)
    rejection_reason = Column(Text, nullable=True)
    approved_by = Column(String(255), nullable=True)
    approved_at = Column(UTCDateTime, nullable=True)
    express_delivery = Column(Boolean, nullable=False, default=False)
    tip = Column(Money, nullable=False, default=0)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="applications")
    transactions = relationship("Transaction", back_populates="application", order_by="Transaction.created_at")

    @property
    def remaining_amount(self):
        return remaining_amount(self.disbursed_amount, self.repaid_amount, self.status)

    @property
    def allowed_actions(self):
        return customer_actions(self.status)


class Transaction(Base):
    """Ledger line posted on disbursement or repayment"""

    __tablename__ = "transactions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    amount = Column(Money, nullable=False)
    type = Column(Enum(TransactionType, native_enum=False, length=16, validate_strings=True), nullable=False)
    status = Column(Enum(TransactionStatus, native_enum=False, length=16, validate_strings=True), nullable=False)
    description = Column(Text, nullable=True)
    reference = Column(String(255), nullable=True)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    application_id = Column(Uuid, ForeignKey("applications.id"), nullable=True, index=True)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="transactions")
    application = relationship("Application", back_populates="transactions")
