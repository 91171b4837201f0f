# services/application_service.py
import logging
from typing import List, Optional

from rentmate.clock import Clock, SystemClock
from rentmate.exceptions import (
     AuthorizationError,
     DuplicateResourceError,
     InvalidTransitionError,
     NotFoundError,
     ValidationError,
)
from rentmate.models import (
     ApplicationStatus,
     LeaseApplication,
     NotificationType,
     Property,
     RelatedEntityType,
)
from rentmate.repositories import Store

logger = logging.getLogger(__name__)

REVIEWABLE = (ApplicationStatus.PENDING, ApplicationStatus.UNDER_REVIEW)


class ApplicationService:
     """Tenant applications to rent a property, reviewed by its landlord."""

     def __init__(self, store: Store, clock: Optional[Clock] = None, notifier=None):
          self.store = store
          self.clock = clock or SystemClock()
          self.notifier = notifier

     def _property(self, property_id: int) -> Property:
          prop = self.store.properties.get(property_id)
          if prop is None:
               raise NotFoundError("Property", property_id)
          return prop

     def get_application(self, application_id: int) -> LeaseApplication:
          application = self.store.applications.get(application_id)
          if application is None:
               raise NotFoundError("Application", application_id)
          return application

     def _for_landlord(self, actor_id: int, application_id: int):
          application = self.get_application(application_id)
          prop = self._property(application.property_id)
          if prop.landlord_id != actor_id:
               raise AuthorizationError("Only the property's landlord can review this application")
          return application, prop

     def submit(self, actor_id: int, property_id: int, message: Optional[str] = None) -> LeaseApplication:
          prop = self._property(property_id)
          if prop.landlord_id == actor_id:
               raise ValidationError("You cannot apply to your own property")
          existing = self.store.applications.first(
               lambda a: a.is_open, property_id=property_id, tenant_id=actor_id
          )
          if existing is not None:
               raise DuplicateResourceError(
                    f"You already have an open application ({existing.id}) for this property"
               )

          application = LeaseApplication(
               property_id=property_id,
               tenant_id=actor_id,
               message=message,
               status=ApplicationStatus.PENDING,
               created_at=self.clock.now(),
          )
          self.store.applications.add(application)
          logger.info("Application %s submitted for property %s", application.id, property_id)
          self._notify(
               prop.landlord_id, application,
               "New application",
               f"A tenant applied to rent {prop.title}.",
               "/dashboard/landlord-applications",
          )
          return application

     def start_review(self, actor_id: int, application_id: int) -> LeaseApplication:
          application, _ = self._for_landlord(actor_id, application_id)
          if application.status != ApplicationStatus.PENDING:
               raise InvalidTransitionError(f"Application {application_id} is not pending")
          application.status = ApplicationStatus.UNDER_REVIEW
          return application

     def approve(self, actor_id: int, application_id: int) -> LeaseApplication:
          application, prop = self._for_landlord(actor_id, application_id)
          if application.status not in REVIEWABLE:
               raise InvalidTransitionError(
                    f"Application {application_id} cannot be approved (status: {application.status.value})"
               )
          application.status = ApplicationStatus.APPROVED
          application.reviewed_at = self.clock.now()
          logger.info("Application %s approved", application.id)
          self._notify(
               application.tenant_id, application,
               "Application approved",
               f"Your application for {prop.title} was approved. A lease will follow.",
               "/dashboard/applications",
          )
          return application

     def reject(self, actor_id: int, application_id: int, reason: Optional[str] = None) -> LeaseApplication:
          application, prop = self._for_landlord(actor_id, application_id)
          if application.status not in REVIEWABLE:
               raise InvalidTransitionError(
                    f"Application {application_id} cannot be rejected (status: {application.status.value})"
               )
          application.status = ApplicationStatus.REJECTED
          application.rejection_reason = reason
          application.reviewed_at = self.clock.now()
          logger.info("Application %s rejected", application.id)
          self._notify(
               application.tenant_id, application,
               "Application rejected",
               f"Your application for {prop.title} was not accepted.",
               "/dashboard/applications",
          )
          return application

     def withdraw(self, actor_id: int, application_id: int) -> LeaseApplication:
          application = self.get_application(application_id)
          if application.tenant_id != actor_id:
               raise AuthorizationError("Only the applicant can withdraw an application")
          if not application.is_open:
               raise InvalidTransitionError(f"Application {application_id} is already closed")
          if self.store.leases.first(application_id=application_id) is not None:
               raise InvalidTransitionError("A lease was already drafted from this application")
          application.status = ApplicationStatus.WITHDRAWN
          return application

     def applications_for_tenant(self, tenant_id: int) -> List[LeaseApplication]:
          return self.store.applications.list(tenant_id=tenant_id)

     def applications_for_property(self, actor_id: int, property_id: int) -> List[LeaseApplication]:
          prop = self._property(property_id)
          if prop.landlord_id != actor_id:
               raise AuthorizationError("Only the property's landlord can list its applications")
          return self.store.applications.list(property_id=property_id)

     def _notify(self, user_id, application, title, description, link):
          if self.notifier is None:
               return
          self.notifier.notify(
               user_id,
               NotificationType.APPLICATION,
               title,
               description,
               link=link,
               related_entity_id=application.id,
               related_entity_type=RelatedEntityType.LEASE_APPLICATION,
          )
