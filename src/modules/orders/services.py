"""Order service layer (Use Cases).

Orchestrates order creation with stock reservation, cancellation with
stock release, status transitions and deletion.  All write operations
run in a single transaction opened here.

Rules enforced:
- The ordering user must exist and be active.
- An order needs at least one item; every quantity must be positive.
- Every product must exist, be active, be available and have enough
  stock.  Items are reserved in request order, so duplicate product ids
  compete for the same stock and the first listed line wins.
- A failure on any item rolls back the whole order: no header, no items,
  no stock decrement survives.
- Product rows are locked (SELECT FOR UPDATE) in primary-key order before
  any stock is read, serialising concurrent reservations per product.
- Only PENDING orders can be cancelled; cancelling restores every item's
  stock.  A generic status update to CANCELLED goes through the same
  protocol.
- Status transitions follow ``modules.orders.lifecycle``; every applied
  change is recorded in the status history.
- PENDING orders cannot be deleted.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

import structlog

from django.db import transaction

from modules.orders.constants import OrderStatus
from modules.orders.events import (
    OrderCancelled,
    OrderCreated,
    OrderDeleted,
    OrderStatusChanged,
)
from modules.orders.exceptions import (
    EmptyOrder,
    InactiveUser,
    InsufficientStock,
    InvalidOrderStatus,
    InvalidQuantity,
    OrderNotFound,
    ProductNotFound,
    ProductUnavailable,
    UserNotFound,
)
from modules.orders.lifecycle import (
    Transition,
    check_transition,
    ensure_cancellable,
    ensure_deletable,
    parse_status,
)

if TYPE_CHECKING:
    from modules.orders.dtos import CreateOrderDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.repositories.interfaces import IProductRepository
    from modules.users.repositories.interfaces import IUserRepository

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        user_repository: IUserRepository,
        product_repository: IProductRepository,
    ) -> None:
        self._order_repo = order_repository
        self._user_repo = user_repository
        self._product_repo = product_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(self, dto: CreateOrderDTO) -> Order:
        """Create an order, reserving stock for every item atomically.

        Steps:
        1. Validate the user exists and is active.
        2. Reject an empty item list.
        3. Lock every referenced product row, sorted by PK.
        4. Create the PENDING order header.
        5. For each item, in request order: validate quantity, product
           existence/activity, availability and stock; snapshot the price,
           persist the item, decrement stock, accumulate the total.
        6. Store the total and the initial history record.

        Raises:
            UserNotFound, InactiveUser, EmptyOrder, InvalidQuantity,
            ProductNotFound, ProductUnavailable, InsufficientStock.
        """
        log = logger.bind(user_id=str(dto.user_id), item_count=len(dto.items))
        log.info("order.creation_started")

        self._get_active_user(dto.user_id)

        if not dto.items:
            raise EmptyOrder("Order must have at least one item.")

        products = self._product_repo.lock_many(item.product_id for item in dto.items)
        order = self._order_repo.create(user_id=dto.user_id, notes=dto.notes)

        total = Decimal("0.00")
        for position, item_dto in enumerate(dto.items, start=1):
            if item_dto.quantity <= 0:
                raise InvalidQuantity(
                    f"Item {position}: quantity must be greater than 0 "
                    f"(got {item_dto.quantity})."
                )

            product = products.get(item_dto.product_id)
            if product is None or not product.is_active:
                raise ProductNotFound(f"Product {item_dto.product_id} not found.")
            if not product.is_available:
                raise ProductUnavailable(f"Product {product.name} is not available.")
            if product.stock < item_dto.quantity:
                raise InsufficientStock(
                    f"Insufficient stock for {product.name}: requested "
                    f"{item_dto.quantity}, available {product.stock}."
                )

            price = product.price
            self._order_repo.add_item(order, product, item_dto.quantity, price)
            self._product_repo.set_stock(product, product.stock - item_dto.quantity)
            total += price * item_dto.quantity

            log.info(
                "order.stock_reserved",
                product_id=str(product.id),
                quantity=item_dto.quantity,
                remaining=product.stock,
            )

        order.total = total
        order.add_domain_event(
            OrderCreated(
                aggregate_id=order.id,
                payload={
                    "user_id": str(dto.user_id),
                    "total": str(total),
                    "items": [
                        {"product_id": str(i.product_id), "quantity": i.quantity}
                        for i in dto.items
                    ],
                },
            )
        )
        self._order_repo.save(order)
        self._order_repo.add_history(
            order_id=order.id,
            status=OrderStatus.PENDING,
            notes="Order created",
        )

        log.info("order.created", order_id=str(order.id), total=str(total))
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def cancel_order(self, order_id: UUID | str, notes: str = "") -> Order:
        """Cancel a PENDING order and release its reserved stock.

        Acquires a row-level lock on the order **first** so concurrent
        cancellations cannot release stock twice.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderStatus: the order is not PENDING.
        """
        order = self._lock_order(order_id)
        log = logger.bind(order_id=str(order.id), current_status=order.status)
        self._check_cancellable(order, log)
        return self._cancel_locked(order, notes, log)

    @transaction.atomic
    def update_status(
        self,
        order_id: UUID | str,
        new_status: str,
        notes: str = "",
    ) -> Order:
        """Move an order to ``new_status`` following the lifecycle rules.

        A target of CANCELLED is delegated to the cancellation protocol so
        stock is always restored.  Requesting the current status is a
        no-op and records no history.

        Raises:
            InvalidStatusValue: ``new_status`` is not a known status.
            OrderNotFound: order does not exist.
            InvalidOrderStatus: the transition is not allowed.
        """
        target = parse_status(new_status)
        order = self._lock_order(order_id)
        log = logger.bind(
            order_id=str(order.id),
            current_status=order.status,
            new_status=target.value,
        )

        try:
            transition = check_transition(order.status, target)
        except InvalidOrderStatus:
            log.warning("order.invalid_transition")
            raise

        if transition is Transition.NOOP:
            log.info("order.status_unchanged")
            return order

        if transition is Transition.CANCEL:
            self._check_cancellable(order, log)
            return self._cancel_locked(order, notes, log)

        old_status = order.status
        order.status = target
        order.add_domain_event(
            OrderStatusChanged(
                aggregate_id=order.id,
                payload={"old_status": old_status, "new_status": target.value},
            )
        )
        self._order_repo.save(order)
        self._order_repo.add_history(
            order_id=order.id,
            status=target,
            notes=notes,
            old_status=old_status,
        )

        log.info("order.status_updated")
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def delete_order(self, order_id: UUID | str) -> None:
        """Delete an order that already left PENDING; items cascade.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderStatus: the order is still PENDING.
        """
        order = self._lock_order(order_id)
        log = logger.bind(order_id=str(order.id), current_status=order.status)

        try:
            ensure_deletable(order.status)
        except InvalidOrderStatus:
            log.warning("order.delete_not_allowed")
            raise

        order.add_domain_event(
            OrderDeleted(aggregate_id=order.id, payload={"status": order.status})
        )
        self._order_repo.remove(order)
        log.info("order.removed")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: UUID | str) -> Order:
        """Retrieve a single order with items, products and history.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """Return a list of orders, optionally filtered."""
        return self._order_repo.list(filters)

    def list_orders_for_user(self, user_id: Any) -> List[Order]:
        """Return every order placed by ``user_id``.

        Raises:
            UserNotFound: if the user does not exist.
        """
        user = self._user_repo.get_by_id(user_id)
        if not user:
            raise UserNotFound(f"User {user_id} not found.")
        return self._order_repo.list({"user_id": user.pk})

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _get_active_user(self, user_id: Any) -> Any:
        user = self._user_repo.get_by_id(user_id)
        if not user:
            raise UserNotFound(f"User {user_id} not found.")
        if not user.is_active:
            raise InactiveUser(f"User {user_id} is not active.")
        return user

    def _lock_order(self, order_id: UUID | str) -> Order:
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    @staticmethod
    def _check_cancellable(order: Order, log: Any) -> None:
        try:
            ensure_cancellable(order.status)
        except InvalidOrderStatus:
            log.warning("order.cancel_not_allowed")
            raise

    def _cancel_locked(self, order: Order, notes: str, log: Any) -> Order:
        """Release stock for every item and flip the order to CANCELLED.

        The caller holds the order lock and has checked the precondition.
        Withdrawn products get their stock back too: the item still
        references them.
        """
        items = list(order.items.all())
        products = self._product_repo.lock_many(item.product_id for item in items)

        released = []
        for item in items:
            product = products[item.product_id]
            self._product_repo.set_stock(product, product.stock + item.quantity)
            released.append(
                {"product_id": str(product.id), "quantity": item.quantity}
            )
            log.info(
                "order.stock_released",
                product_id=str(product.id),
                quantity=item.quantity,
                restored_stock=product.stock,
            )

        old_status = order.status
        order.status = OrderStatus.CANCELLED
        order.add_domain_event(
            OrderCancelled(aggregate_id=order.id, payload={"released": released})
        )
        self._order_repo.save(order)
        self._order_repo.add_history(
            order_id=order.id,
            status=OrderStatus.CANCELLED,
            notes=notes or "Order cancelled",
            old_status=old_status,
        )

        log.info("order.cancelled")
        return self._order_repo.get_by_id(str(order.id)) or order
