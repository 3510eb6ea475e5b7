"""Repository for the Order aggregate."""

from protean.exceptions import ObjectNotFoundError

from store.domain import store
from store.errors import EntityKind, NotFound
from store.order.order import Order


@store.repository(part_of=Order)
class OrderRepository:
    def find(self, order_id) -> Order:
        try:
            return self.get(str(order_id))
        except ObjectNotFoundError:
            raise NotFound(EntityKind.ORDER, order_id) from None

    def find_for_user(self, order_id, user_id) -> Order:
        """Like ``find`` but hides orders that belong to someone else."""
        order = self.find(order_id)
        if str(order.user_id) != str(user_id):
            raise NotFound(EntityKind.ORDER, order_id)
        return order

    def for_user(self, user_id) -> list[Order]:
        """The user's orders, newest first."""
        records = self._dao.query.filter(user_id=str(user_id)).order_by("-created_at").all().items
        return [self.get(record.id) for record in records]
