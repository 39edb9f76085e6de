"""Order domain constants.

Status, payment method and payment status choices for the order
lifecycle.  Admins may move an order between any two statuses; stock
effects of those moves live in ``modules.orders.services``.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    PROCESSING = "processing", "Processing"
    SHIPPED = "shipped", "Shipped"
    DELIVERED = "delivered", "Delivered"
    CANCELLED = "cancelled", "Cancelled"


class PaymentMethod(models.TextChoices):
    COD = "cod", "Cash on delivery"
    ONLINE = "online", "Online"


class PaymentStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    COMPLETED = "completed", "Completed"
    FAILED = "failed", "Failed"
    REFUNDED = "refunded", "Refunded"


# Only these states may be cancelled by the customer.
CUSTOMER_CANCELLABLE: set[str] = {OrderStatus.PENDING}

TRACKING_PREFIX = "TRK"
