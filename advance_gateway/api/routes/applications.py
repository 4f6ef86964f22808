"""/api/applications - create, read, update and move applications through their lifecycle"""

from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, status

from advance_gateway.api.dependencies import get_application_service, get_current_user, get_ledger_client
from advance_gateway.api.schemas import (
    ApplicationCreateRequest,
    ApplicationData,
    ApplicationListData,
    ApplicationListResponse,
    ApplicationResponse,
    ApplicationSchema,
    ApplicationUpdateRequest,
    DisbursementRequest,
    RepaymentRequest,
    SummaryData,
    SummaryResponse,
    SummarySchema,
    TransactionListData,
    TransactionListResponse,
    TransactionSchema,
)
from advance_gateway.infrastructure.clients.ledger import LedgerClient
from advance_gateway.infrastructure.database.models import Application, Transaction, User
from advance_gateway.services.applications import ApplicationService, PostedTransition, parse_application_id

router = APIRouter()


def application_response(application: Application) -> ApplicationResponse:
    return ApplicationResponse(data=ApplicationData(application=ApplicationSchema.model_validate(application)))


def application_list_response(applications: List[Application]) -> ApplicationListResponse:
    return ApplicationListResponse(
        results=len(applications),
        data=ApplicationListData(applications=[ApplicationSchema.model_validate(a) for a in applications]),
    )


def transaction_list_response(transactions: List[Transaction]) -> TransactionListResponse:
    return TransactionListResponse(
        results=len(transactions),
        data=TransactionListData(transactions=[TransactionSchema.model_validate(t) for t in transactions]),
    )


def _notify_ledger(
    background_tasks: BackgroundTasks,
    ledger_client: Optional[LedgerClient],
    posted: PostedTransition,
) -> None:
    """Send the ledger event after the response, when a webhook is configured"""
    if ledger_client is not None:
        background_tasks.add_task(ledger_client.deliver, posted.event)


@router.post("", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
def create_application(
    request_body: ApplicationCreateRequest,
    current_user: User = Depends(get_current_user),
    service: ApplicationService = Depends(get_application_service),
):
    """
    Create a cash-advance application.

    With auto-approval on (the default) the returned application is
    already APPROVED.
    """
    application = service.create(
        current_user,
        amount=request_body.amount,
        purpose=request_body.purpose,
        express_delivery=request_body.express_delivery,
        tip=request_body.tip,
    )
    return application_response(application)


@router.get("", response_model=ApplicationListResponse)
def list_applications(
    current_user: User = Depends(get_current_user),
    service: ApplicationService = Depends(get_application_service),
):
    """The caller's own applications, newest first"""
    return application_list_response(service.list(current_user))


@router.get("/summary", response_model=SummaryResponse)
def get_summary(
    current_user: User = Depends(get_current_user),
    service: ApplicationService = Depends(get_application_service),
):
    """Counts per status, outstanding and repaid totals, available credit"""
    summary = service.summary(current_user)
    return SummaryResponse(data=SummaryData(summary=SummarySchema.model_validate(summary)))


@router.get("/{application_id}", response_model=ApplicationResponse)
def get_application(
    application_id: str,
    current_user: User = Depends(get_current_user),
    service: ApplicationService = Depends(get_application_service),
):
    application = service.get(current_user, parse_application_id(application_id))
    return application_response(application)


@router.patch("/{application_id}", response_model=ApplicationResponse)
def update_application(
    application_id: str,
    request_body: ApplicationUpdateRequest,
    current_user: User = Depends(get_current_user),
    service: ApplicationService = Depends(get_application_service),
):
    """Edit amount, purpose, expressDelivery or tip while the application is PENDING"""
    application = service.update(
        current_user,
        parse_application_id(application_id),
        request_body.model_dump(exclude_unset=True),
    )
    return application_response(application)


@router.post("/{application_id}/disbursement", response_model=ApplicationResponse)
def submit_disbursement(
    application_id: str,
    background_tasks: BackgroundTasks,
    request_body: Optional[DisbursementRequest] = None,
    current_user: User = Depends(get_current_user),
    service: ApplicationService = Depends(get_application_service),
    ledger_client: Optional[LedgerClient] = Depends(get_ledger_client),
):
    """APPROVED -> DISBURSED; posts a ledger transaction"""
    request_body = request_body or DisbursementRequest()
    posted = service.disburse(
        current_user,
        parse_application_id(application_id),
        amount=request_body.amount,
        express_delivery=request_body.express_delivery,
        tip=request_body.tip,
    )
    _notify_ledger(background_tasks, ledger_client, posted)
    return application_response(posted.application)


@router.post("/{application_id}/repayment", response_model=ApplicationResponse)
def submit_repayment(
    application_id: str,
    request_body: RepaymentRequest,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_user),
    service: ApplicationService = Depends(get_application_service),
    ledger_client: Optional[LedgerClient] = Depends(get_ledger_client),
):
    """DISBURSED -> REPAID in a single full settlement; posts a ledger transaction"""
    posted = service.repay(current_user, parse_application_id(application_id), request_body.amount)
    _notify_ledger(background_tasks, ledger_client, posted)
    return application_response(posted.application)


@router.post("/{application_id}/cancel", response_model=ApplicationResponse)
def cancel_application(
    application_id: str,
    current_user: User = Depends(get_current_user),
    service: ApplicationService = Depends(get_application_service),
):
    """PENDING -> CANCELLED"""
    application = service.cancel(current_user, parse_application_id(application_id))
    return application_response(application)


@router.get("/{application_id}/transactions", response_model=TransactionListResponse)
def list_application_transactions(
    application_id: str,
    current_user: User = Depends(get_current_user),
    service: ApplicationService = Depends(get_application_service),
):
    transactions = service.list_transactions(current_user, parse_application_id(application_id))
    return transaction_list_response(transactions)
