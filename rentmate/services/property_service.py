# services/property_service.py
import logging
from decimal import Decimal
from typing import List, Optional

from rentmate.clock import Clock, SystemClock
from rentmate.exceptions import AuthorizationError, NotFoundError, ValidationError
from rentmate.models import NotificationType, Property, RelatedEntityType, UserRole
from rentmate.repositories import Store

logger = logging.getLogger(__name__)


class PropertyService:
     """Listings and their landlord/manager assignment."""

     def __init__(self, store: Store, clock: Optional[Clock] = None, notifier=None):
          self.store = store
          self.clock = clock or SystemClock()
          self.notifier = notifier

     def get_property(self, property_id: int) -> Property:
          prop = self.store.properties.get(property_id)
          if prop is None:
               raise NotFoundError("Property", property_id)
          return prop

     def create_property(
          self,
          actor_id: int,
          title: str,
          address: Optional[str] = None,
          monthly_rent: Optional[Decimal] = None,
     ) -> Property:
          prop = Property(
               landlord_id=actor_id,
               title=title,
               address=address,
               monthly_rent=monthly_rent,
               created_at=self.clock.now(),
          )
          self.store.properties.add(prop)
          logger.info("Property %s listed by landlord %s", prop.id, actor_id)
          return prop

     def list_properties(self) -> List[Property]:
          return self.store.properties.list()

     def properties_for(self, actor_id: int) -> List[Property]:
          """Properties the actor owns or manages."""
          return self.store.properties.list(lambda prop: prop.is_handled_by(actor_id))

     def assign_manager(self, actor_id: int, property_id: int, manager_email: str) -> Property:
          """
          Landlord hands day-to-day handling of a property to a manager.

          Raises:
               AuthorizationError: actor is not the property's landlord
               ValidationError: no property manager is registered with that email
          """
          prop = self.get_property(property_id)
          if prop.landlord_id != actor_id:
               raise AuthorizationError("Only the property's landlord can assign a manager")
          email = (manager_email or "").strip().lower()
          manager = self.store.users.first(email=email)
          if manager is None or manager.role != UserRole.PROPERTY_MANAGER:
               raise ValidationError(f"No property manager is registered with {email}")

          prop.manager_id = manager.id
          logger.info("Property %s now managed by user %s", prop.id, manager.id)
          if self.notifier is not None:
               self.notifier.notify(
                    manager.id,
                    NotificationType.PROPERTY,
                    "New property assignment",
                    f"You now manage {prop.title}.",
                    related_entity_id=prop.id,
                    related_entity_type=RelatedEntityType.PROPERTY,
               )
          return prop

     def remove_manager(self, actor_id: int, property_id: int) -> Property:
          prop = self.get_property(property_id)
          if prop.landlord_id != actor_id:
               raise AuthorizationError("Only the property's landlord can remove its manager")
          prop.manager_id = None
          return prop
