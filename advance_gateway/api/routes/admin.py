"""/api/admin/applications - manual review queue for admins"""

from fastapi import APIRouter, Depends

from advance_gateway.api.dependencies import get_current_user, get_review_service
from advance_gateway.api.routes.applications import application_list_response, application_response
from advance_gateway.api.schemas import ApplicationListResponse, ApplicationResponse, RejectionRequest
from advance_gateway.infrastructure.database.models import User
from advance_gateway.services.applications import ReviewService, parse_application_id

router = APIRouter()


@router.get("", response_model=ApplicationListResponse)
def list_pending(
    current_user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    """PENDING applications across all users, oldest first"""
    return application_list_response(service.list_pending(current_user))


@router.post("/{application_id}/approve", response_model=ApplicationResponse)
def approve_application(
    application_id: str,
    current_user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    application = service.approve(current_user, parse_application_id(application_id))
    return application_response(application)


@router.post("/{application_id}/reject", response_model=ApplicationResponse)
def reject_application(
    application_id: str,
    request_body: RejectionRequest,
    current_user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    """PENDING -> REJECTED with a reason shown to the applicant"""
    application = service.reject(current_user, parse_application_id(application_id), request_body.reason)
    return application_response(application)
