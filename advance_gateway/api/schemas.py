"""Pydantic schemas for API request/response validation"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from advance_gateway.domain.lifecycle import ApplicationStatus, TransactionStatus, TransactionType

# Decimals go over the wire as JSON numbers, not strings
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
PositiveAmount = Annotated[Decimal, Field(gt=0, max_digits=10, decimal_places=2)]
NonNegativeAmount = Annotated[Decimal, Field(ge=0, max_digits=10, decimal_places=2)]


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# --- Auth ---


class RegisterRequest(CamelModel):
    """Request body for POST /api/auth/register"""

    email: EmailStr
    password: str = Field(..., min_length=6, description="At least 6 characters")
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)


class LoginRequest(CamelModel):
    """Request body for POST /api/auth/login"""

    email: EmailStr
    password: str = Field(..., min_length=1)


class UserSchema(CamelModel):
    id: uuid.UUID
    email: str
    first_name: str
    last_name: str


class UserData(BaseModel):
    user: UserSchema


class AuthResponse(BaseModel):
    """Response for register and login"""

    status: str = "success"
    token: str
    data: UserData


class CurrentUserResponse(BaseModel):
    """Response for GET /api/auth/me"""

    status: str = "success"
    data: UserData


# --- Applications ---


class ApplicationCreateRequest(CamelModel):
    """Request body for POST /api/applications"""

    amount: PositiveAmount
    purpose: str = Field(..., min_length=1, max_length=500)
    express_delivery: bool = False
    tip: NonNegativeAmount = Decimal("0")


class ApplicationUpdateRequest(CamelModel):
    """
    Request body for PATCH /api/applications/{id}.

    Only these fields are editable; anything else (status, userId, ...) is rejected.
    """

    model_config = ConfigDict(extra="forbid")

    amount: PositiveAmount = None
    purpose: str = Field(None, min_length=1, max_length=500)
    express_delivery: bool = None
    tip: NonNegativeAmount = None


class DisbursementRequest(CamelModel):
    """Request body for POST /api/applications/{id}/disbursement"""

    amount: Optional[PositiveAmount] = Field(None, description="Defaults to the application amount")
    express_delivery: Optional[bool] = None
    tip: Optional[NonNegativeAmount] = None


class RepaymentRequest(CamelModel):
    """Request body for POST /api/applications/{id}/repayment"""

    amount: PositiveAmount


class RejectionRequest(CamelModel):
    """Request body for POST /api/admin/applications/{id}/reject"""

    reason: str = Field(..., min_length=1, max_length=1000)


class ApplicationSchema(CamelModel):
    id: uuid.UUID
    user_id: uuid.UUID
    amount: Money
    purpose: str
    status: ApplicationStatus
    disbursed_amount: Optional[Money] = None
    disbursement_date: Optional[datetime] = None
    repaid_amount: Optional[Money] = None
    repayment_date: Optional[datetime] = None
    remaining_amount: Optional[Money] = None
    allowed_actions: List[str] = Field(default_factory=list, description="Actions the owner can take next")
    rejection_reason: Optional[str] = None
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    express_delivery: bool
    tip: Money
    created_at: datetime
    updated_at: datetime


class ApplicationData(BaseModel):
    application: ApplicationSchema


class ApplicationResponse(BaseModel):
    status: str = "success"
    data: ApplicationData


class ApplicationListData(BaseModel):
    applications: List[ApplicationSchema]


class ApplicationListResponse(BaseModel):
    status: str = "success"
    results: int
    data: ApplicationListData


class SummarySchema(CamelModel):
    counts: Dict[str, int]
    total_applications: int
    outstanding_amount: Money
    repaid_amount: Money
    credit_limit: Money
    available_credit: Money


class SummaryData(BaseModel):
    summary: SummarySchema


class SummaryResponse(BaseModel):
    status: str = "success"
    data: SummaryData


# --- Transactions ---


class TransactionSchema(CamelModel):
    id: uuid.UUID
    amount: Money
    type: TransactionType
    status: TransactionStatus
    description: Optional[str] = None
    reference: Optional[str] = None
    user_id: uuid.UUID
    application_id: Optional[uuid.UUID] = None
    created_at: datetime


class TransactionListData(BaseModel):
    transactions: List[TransactionSchema]


class TransactionListResponse(BaseModel):
    status: str = "success"
    results: int
    data: TransactionListData


class ErrorResponse(BaseModel):
    status: str = "error"
    message: str
