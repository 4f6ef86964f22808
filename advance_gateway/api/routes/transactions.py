"""GET /api/transactions - the caller's ledger lines"""

from fastapi import APIRouter, Depends

from advance_gateway.api.dependencies import get_application_service, get_current_user
from advance_gateway.api.routes.applications import transaction_list_response
from advance_gateway.api.schemas import TransactionListResponse
from advance_gateway.infrastructure.database.models import User
from advance_gateway.services.applications import ApplicationService

router = APIRouter()


@router.get("", response_model=TransactionListResponse)
def list_transactions(
    current_user: User = Depends(get_current_user),
    service: ApplicationService = Depends(get_application_service),
):
    """Disbursement and repayment postings across all of the caller's applications, newest first"""
    return transaction_list_response(service.list_transactions(current_user))
