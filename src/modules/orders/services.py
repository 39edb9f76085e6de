"""Order service layer (Use Cases).

Orchestrates order placement, the admin status workflow, customer
cancellation, refund requests and payment bookkeeping.  All write
operations are atomic: the service defines the unit-of-work boundary,
so a failure never leaves a partial order or a partial stock change.

Business rules enforced:
- Stock is reserved all-or-nothing when an order is placed.
- Moving an order into ``cancelled`` releases its stock; moving it out
  again re-deducts it, and fails as a whole when stock is short.
- Customers may only cancel their own ``pending`` orders and only
  request refunds for their own ``cancelled`` ones.
- History and an outbox event are recorded on every effective change.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.conf import settings
from django.db import transaction
from django.utils import timezone

from modules.core.exceptions import InsufficientStock
from modules.orders.constants import CUSTOMER_CANCELLABLE, OrderStatus
from modules.orders.events import OrderCancelled, OrderCreated, OrderStatusChanged
from modules.orders.exceptions import (
    OrderAccessDenied,
    OrderNotCancellable,
    OrderNotFound,
    OrderNotRefundable,
    OrderProductNotFound,
    TrackingNumberCollision,
)
from modules.orders.inventory import InventoryService, StockLine
from modules.orders.models import Order
from modules.orders.pricing import PricedLine, quote

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.core.authentication import Caller
    from modules.orders.dtos import (
        CancelOrderDTO,
        CreateOrderDTO,
        PaymentVerificationDTO,
        RefundRequestDTO,
        UpdateOrderStatusDTO,
    )
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


def _canonical_id(value: str) -> Optional[str]:
    try:
        return str(UUID(str(value)))
    except ValueError:
        return None


def _stock_lines(order: Order) -> List[StockLine]:
    return [
        StockLine(
            product_id=str(item.product_id) if item.product_id else None,
            quantity=item.quantity,
        )
        for item in order.items.all()
    ]


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
        inventory: Optional[InventoryService] = None,
    ) -> None:
        self._order_repo = order_repository
        self._product_repo = product_repository
        self._inventory = inventory or InventoryService(product_repository)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(self, caller: Caller, dto: CreateOrderDTO) -> Order:
        """Place an order for the caller.

        Steps:
        1. Resolve every product and check its stock.
        2. Price the lines (client or catalog prices, see
           ``ORDERS_TRUST_CLIENT_PRICES``) and compute delivery.
        3. Allocate a tracking number.
        4. Reserve stock and persist the order in ``pending``.
        5. Record ``OrderCreated`` in the outbox (confirmation emails).

        Raises:
            OrderProductNotFound: a product does not exist.
            InsufficientStock: a product cannot cover its quantity.
            TrackingNumberCollision: the tracking number is already taken.
        """
        log = logger.bind(user_id=str(caller.user_id))
        log.info("order.creation_started", item_count=len(dto.items))

        ids = [_canonical_id(item.product) for item in dto.items]
        products = self._product_repo.get_many([i for i in ids if i])

        lines: List[PricedLine] = []
        for item, product_id in zip(dto.items, ids):
            product = products.get(product_id) if product_id else None
            if product is None:
                raise OrderProductNotFound(item.product)
            if product.stock < item.quantity:
                raise InsufficientStock(product.name, product.stock, item.quantity)
            unit_price = (
                item.price if settings.ORDERS_TRUST_CLIENT_PRICES else product.price
            )
            lines.append(
                PricedLine(product=product, quantity=item.quantity, unit_price=unit_price)
            )

        amounts = quote(lines)

        tracking_number = Order.generate_tracking_number()
        if self._order_repo.tracking_number_exists(tracking_number):
            log.error("order.tracking_number_collision", tracking_number=tracking_number)
            raise TrackingNumberCollision()

        self._inventory.reserve(
            StockLine(product_id=str(line.product.id), quantity=line.quantity)
            for line in lines
        )

        order = self._order_repo.create(
            {
                "user_id": caller.user_id,
                "tracking_number": tracking_number,
                "status": OrderStatus.PENDING,
                "subtotal": amounts.subtotal,
                "delivery_charge": amounts.delivery_charge,
                "total_amount": amounts.total,
                "shipping_address": dto.shipping_address.model_dump(),
                "payment_method": dto.payment_method.value,
                "items": [
                    {
                        "product_id": line.product.id,
                        "product_name": line.product.name,
                        "quantity": line.quantity,
                        "unit_price": line.unit_price,
                    }
                    for line in lines
                ],
            }
        )
        self._order_repo.add_history(
            order_id=order.id,
            new_status=OrderStatus.PENDING,
            user_id=caller.user_id,
            notes="Order created",
        )

        order.add_domain_event(OrderCreated(aggregate_id=order.id))
        self._order_repo.save(order)

        log.info(
            "order.created",
            order_id=str(order.id),
            tracking_number=tracking_number,
            total_amount=str(amounts.total),
        )
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def update_status(
        self, caller: Caller, order_id: str, dto: UpdateOrderStatusDTO
    ) -> Order:
        """Move an order to any status (admin).

        Acquires a row-level lock on the order first so concurrent updates
        cannot release or re-deduct stock twice.  Setting the current status
        again changes nothing but the shipping details.

        Raises:
            OrderNotFound: order does not exist.
            InsufficientStock: a cancelled order cannot be reinstated.
        """
        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound()

        old_status = order.status
        new_status = dto.status.value
        log = logger.bind(
            order_id=str(order.id), old_status=old_status, new_status=new_status
        )

        if new_status != old_status:
            if new_status == OrderStatus.CANCELLED:
                self._inventory.release(_stock_lines(order))
            elif old_status == OrderStatus.CANCELLED:
                self._inventory.reapply(_stock_lines(order))

        order.status = new_status
        if new_status == OrderStatus.SHIPPED:
            if dto.expected_delivery_date is not None:
                order.expected_delivery_date = _aware(dto.expected_delivery_date)
            if dto.courier_service:
                order.courier_service = dto.courier_service

        if new_status == old_status:
            self._order_repo.save(order)
            log.info("order.status_unchanged")
            return self._order_repo.get_by_id(str(order.id)) or order

        self._order_repo.add_history(
            order_id=order.id,
            new_status=new_status,
            old_status=old_status,
            user_id=caller.user_id,
            notes=dto.notes,
        )
        order.add_domain_event(
            OrderStatusChanged(
                aggregate_id=order.id, old_status=old_status, new_status=new_status
            )
        )
        self._order_repo.save(order)

        log.info("order.status_updated")
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def cancel_order(self, caller: Caller, order_id: str, dto: CancelOrderDTO) -> Order:
        """Cancel the caller's pending order and release its stock.

        Raises:
            OrderNotFound: order does not exist.
            OrderAccessDenied: the caller does not own the order.
            OrderNotCancellable: the order is not ``pending``.
        """
        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound()
        if not caller.owns(order.user_id):
            raise OrderAccessDenied()

        log = logger.bind(order_id=str(order.id), current_status=order.status)
        if order.status not in CUSTOMER_CANCELLABLE:
            log.warning("order.cancel_not_allowed")
            raise OrderNotCancellable()

        self._inventory.release(_stock_lines(order))

        old_status = order.status
        order.status = OrderStatus.CANCELLED
        order.cancellation_reason = dto.reason
        self._order_repo.add_history(
            order_id=order.id,
            new_status=OrderStatus.CANCELLED,
            old_status=old_status,
            user_id=caller.user_id,
            notes=dto.reason or "Cancelled by customer",
        )
        order.add_domain_event(OrderCancelled(aggregate_id=order.id, reason=dto.reason))
        self._order_repo.save(order)

        log.info("order.cancelled")
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def submit_refund(
        self, caller: Caller, order_id: str, dto: RefundRequestDTO
    ) -> str:
        """Store the bank details of a cancelled order; returns the support number.

        Raises:
            OrderNotFound: order does not exist.
            OrderAccessDenied: the caller does not own the order.
            OrderNotRefundable: the order is not ``cancelled``.
        """
        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound()
        if not caller.owns(order.user_id):
            raise OrderAccessDenied()
        if order.status != OrderStatus.CANCELLED:
            raise OrderNotRefundable()

        order.refund_details = dto.bank_details.model_dump(exclude_none=True)
        self._order_repo.save(order)
        logger.info("order.refund_requested", order_id=str(order.id))
        return settings.REFUND_CONTACT_NUMBER

    @transaction.atomic
    def verify_payment(
        self, caller: Caller, order_id: str, dto: PaymentVerificationDTO
    ) -> Order:
        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound()

        details: Dict[str, Any] = dto.model_dump(
            mode="json", exclude={"payment_status"}
        )
        details["payment_date"] = details["payment_date"] or timezone.now().isoformat()
        details["amount"] = details["amount"] or str(order.total_amount)
        order.payment_details = details
        order.payment_status = dto.resolved_status
        self._order_repo.save(order)

        logger.info(
            "order.payment_recorded",
            order_id=str(order.id),
            payment_status=order.payment_status,
            by=str(caller.user_id),
        )
        return self._order_repo.get_by_id(str(order.id)) or order

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, caller: Caller, order_id: str) -> Order:
        """Retrieve one order for its owner or an admin.

        Raises:
            OrderNotFound: if the order does not exist.
            OrderAccessDenied: the caller is neither owner nor admin.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound()
        if not (caller.is_admin or caller.owns(order.user_id)):
            raise OrderAccessDenied("Access denied")
        return order

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet[Order]:
        return self._order_repo.list(filters)

    def list_my_orders(self, caller: Caller) -> QuerySet[Order]:
        return self._order_repo.list_for_user(str(caller.user_id))

    def list_user_orders(self, user_id: str) -> QuerySet[Order]:
        return self._order_repo.list_for_user(user_id)


def _aware(value):
    if timezone.is_naive(value):
        return timezone.make_aware(value)
    return value
