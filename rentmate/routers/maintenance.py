# routers/maintenance.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from rentmate.auth import require_role, verify_token
from rentmate.dependencies import get_clock, get_maintenance_service
from rentmate.models import MaintenancePriority, MaintenanceStatus
from rentmate.schemas.maintenance import (
     AcceptMaintenanceRequest,
     AddCommentRequest,
     CreateMaintenanceRequest,
     MaintenanceCommentResponse,
     MaintenanceEventResponse,
     MaintenanceListItem,
     MaintenanceListResponse,
     MaintenanceResponse,
     MaintenanceSummaryResponse,
     RejectMaintenanceRequest,
     ReopenMaintenanceRequest,
     ResolveMaintenanceRequest,
     ScheduleMaintenanceRequest,
     StartWorkRequest,
     UpdatePriorityRequest,
)
from rentmate.services import MaintenanceService

router = APIRouter(prefix="/api/maintenance", tags=["maintenance"])

HANDLERS = ("landlord", "property_manager")


def _listing(rows, total, total_pages, page, size, now) -> MaintenanceListResponse:
     return MaintenanceListResponse(
          content=[
               MaintenanceListItem(
                    id=r.id,
                    property_id=r.property_id,
                    tenant_id=r.tenant_id,
                    title=r.title,
                    priority=r.priority,
                    status=r.status,
                    created_at=r.created_at,
                    days_open=r.days_open(now),
               )
               for r in rows
          ],
          total_elements=total,
          total_pages=total_pages,
          page=page,
          size=size,
     )


@router.post("", response_model=MaintenanceResponse, status_code=status.HTTP_201_CREATED)
def create_request(
     body: CreateMaintenanceRequest,
     service: MaintenanceService = Depends(get_maintenance_service),
     token: dict = Depends(require_role("tenant")),
):
     return service.create_request(token["id"], body.lease_id, body.title, body.description, body.priority)


@router.get("/my", response_model=MaintenanceListResponse)
def my_requests(
     status_filter: Optional[MaintenanceStatus] = Query(None, alias="status"),
     priority: Optional[MaintenancePriority] = None,
     lease_id: Optional[int] = None,
     page: int = Query(0, ge=0),
     size: int = Query(20, ge=1, le=100),
     service: MaintenanceService = Depends(get_maintenance_service),
     clock=Depends(get_clock),
     token: dict = Depends(verify_token),
):
     rows, total, total_pages = service.requests_for_tenant(token["id"], status_filter, priority, lease_id, page, size)
     return _listing(rows, total, total_pages, page, size, clock.now())


@router.get("/for-landlord", response_model=MaintenanceListResponse)
def handler_requests(
     status_filter: Optional[MaintenanceStatus] = Query(None, alias="status"),
     priority: Optional[MaintenancePriority] = None,
     property_id: Optional[int] = None,
     page: int = Query(0, ge=0),
     size: int = Query(20, ge=1, le=100),
     service: MaintenanceService = Depends(get_maintenance_service),
     clock=Depends(get_clock),
     token: dict = Depends(require_role(*HANDLERS)),
):
     rows, total, total_pages = service.requests_for_handler(
          token["id"], status_filter, priority, property_id, page, size
     )
     return _listing(rows, total, total_pages, page, size, clock.now())


@router.get("/summary", response_model=MaintenanceSummaryResponse)
def summary(
     service: MaintenanceService = Depends(get_maintenance_service),
     token: dict = Depends(require_role(*HANDLERS)),
):
     return service.summary(token["id"])


@router.get("/{request_id}", response_model=MaintenanceResponse)
def get_request(
     request_id: int,
     service: MaintenanceService = Depends(get_maintenance_service),
     token: dict = Depends(verify_token),
):
     return service.get_request(token["id"], request_id)


@router.patch("/{request_id}/cancel", response_model=MaintenanceResponse)
def cancel_request(
     request_id: int,
     service: MaintenanceService = Depends(get_maintenance_service),
     token: dict = Depends(verify_token),
):
     return service.cancel(token["id"], request_id)


@router.patch("/{request_id}/accept", response_model=MaintenanceResponse)
def accept_request(
     request_id: int,
     body: Optional[AcceptMaintenanceRequest] = None,
     service: MaintenanceService = Depends(get_maintenance_service),
     token: dict = Depends(require_role(*HANDLERS)),
):
     body = body or AcceptMaintenanceRequest()
     return service.accept(token["id"], request_id, body.notes, body.estimated_cost)


@router.patch("/{request_id}/reject", response_model=MaintenanceResponse)
def reject_request(
     request_id: int,
     body: RejectMaintenanceRequest,
     service: MaintenanceService = Depends(get_maintenance_service),
     token: dict = Depends(require_role(*HANDLERS)),
):
     return service.reject(token["id"], request_id, body.reason)


@router.patch("/{request_id}/schedule", response_model=MaintenanceResponse)
def schedule_work(
     request_id: int,
     body: ScheduleMaintenanceRequest,
     service: MaintenanceService = Depends(get_maintenance_service),
     token: dict = Depends(require_role(*HANDLERS)),
):
     return service.schedule(token["id"], request_id, body.scheduled_for, body.assigned_contractor, body.notes)


@router.patch("/{request_id}/start", response_model=MaintenanceResponse)
def start_work(
     request_id: int,
     body: Optional[StartWorkRequest] = None,
     service: MaintenanceService = Depends(get_maintenance_service),
     token: dict = Depends(require_role(*HANDLERS)),
):
     body = body or StartWorkRequest()
     return service.start_work(token["id"], request_id, body.assigned_contractor, body.notes)


@router.patch("/{request_id}/resolve", response_model=MaintenanceResponse)
def resolve_request(
     request_id: int,
     body: Optional[ResolveMaintenanceRequest] = None,
     service: MaintenanceService = Depends(get_maintenance_service),
     token: dict = Depends(require_role(*HANDLERS)),
):
     body = body or ResolveMaintenanceRequest()
     return service.resolve(token["id"], request_id, body.resolution_notes, body.actual_cost)


@router.patch("/{request_id}/reopen", response_model=MaintenanceResponse)
def reopen_request(
     request_id: int,
     body: ReopenMaintenanceRequest,
     service: MaintenanceService = Depends(get_maintenance_service),
     token: dict = Depends(verify_token),
):
     return service.reopen(token["id"], request_id, body.reason)


@router.patch("/{request_id}/priority", response_model=MaintenanceResponse)
def update_priority(
     request_id: int,
     body: UpdatePriorityRequest,
     service: MaintenanceService = Depends(get_maintenance_service),
     token: dict = Depends(require_role(*HANDLERS)),
):
     return service.update_priority(token["id"], request_id, body.priority, body.reason)


@router.post("/{request_id}/comments", response_model=MaintenanceCommentResponse, status_code=status.HTTP_201_CREATED)
def add_comment(
     request_id: int,
     body: AddCommentRequest,
     service: MaintenanceService = Depends(get_maintenance_service),
     token: dict = Depends(verify_token),
):
     return service.add_comment(token["id"], request_id, body.content)


@router.get("/{request_id}/comments", response_model=List[MaintenanceCommentResponse])
def list_comments(
     request_id: int,
     service: MaintenanceService = Depends(get_maintenance_service),
     token: dict = Depends(verify_token),
):
     return service.comments(token["id"], request_id)


@router.get("/{request_id}/timeline", response_model=List[MaintenanceEventResponse])
def timeline(
     request_id: int,
     service: MaintenanceService = Depends(get_maintenance_service),
     token: dict = Depends(verify_token),
):
     return service.timeline(token["id"], request_id)
