# dependencies.py
"""
FastAPI dependency wiring: one Store per request session, services built on
it with the app's clock and realtime hub.
"""
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from rentmate.clock import Clock
from rentmate.database import get_session
from rentmate.realtime import RealtimeHub
from rentmate.repositories import Store
from rentmate.services import (
     ApplicationService,
     ConversationService,
     LeaseService,
     MaintenanceService,
     NotificationService,
     PaymentService,
     PropertyService,
     RentScheduleService,
)


def get_store(db: Session = Depends(get_session)) -> Store:
     return Store.for_session(db)


def get_clock(request: Request) -> Clock:
     return request.app.state.clock


def get_hub(request: Request) -> RealtimeHub:
     return request.app.state.hub


def get_notification_service(
     store: Store = Depends(get_store),
     hub: RealtimeHub = Depends(get_hub),
     clock: Clock = Depends(get_clock),
) -> NotificationService:
     return NotificationService(store, hub, clock)


def get_lease_service(
     store: Store = Depends(get_store),
     clock: Clock = Depends(get_clock),
     notifier: NotificationService = Depends(get_notification_service),
) -> LeaseService:
     return LeaseService(store, clock, notifier)


def get_schedule_service(
     store: Store = Depends(get_store),
     clock: Clock = Depends(get_clock),
     notifier: NotificationService = Depends(get_notification_service),
) -> RentScheduleService:
     return RentScheduleService(store, clock, notifier)


def get_payment_service(
     store: Store = Depends(get_store),
     clock: Clock = Depends(get_clock),
     notifier: NotificationService = Depends(get_notification_service),
     leases: LeaseService = Depends(get_lease_service),
     schedule: RentScheduleService = Depends(get_schedule_service),
) -> PaymentService:
     return PaymentService(store, clock, notifier, leases=leases, schedule=schedule)


def get_application_service(
     store: Store = Depends(get_store),
     clock: Clock = Depends(get_clock),
     notifier: NotificationService = Depends(get_notification_service),
) -> ApplicationService:
     return ApplicationService(store, clock, notifier)


def get_conversation_service(
     store: Store = Depends(get_store),
     clock: Clock = Depends(get_clock),
     hub: RealtimeHub = Depends(get_hub),
     notifier: NotificationService = Depends(get_notification_service),
) -> ConversationService:
     return ConversationService(store, clock, hub, notifier)


def get_property_service(
     store: Store = Depends(get_store),
     clock: Clock = Depends(get_clock),
     notifier: NotificationService = Depends(get_notification_service),
) -> PropertyService:
     return PropertyService(store, clock, notifier)


def get_maintenance_service(
     store: Store = Depends(get_store),
     clock: Clock = Depends(get_clock),
     notifier: NotificationService = Depends(get_notification_service),
) -> MaintenanceService:
     return MaintenanceService(store, clock, notifier)
