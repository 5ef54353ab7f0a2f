from decimal import Decimal, ROUND_HALF_UP

from bson import ObjectId
from bson.errors import InvalidId

from .exceptions import NotFound, ValidationFailed
from .models import Order

STATUS_FLOW = [Order.PENDING, Order.IN_PROGRESS, Order.DELIVERED]
TERMINAL_STATUS = Order.DELIVERED

# Spellings accepted from clients in addition to the canonical values
_STATUS_ALIASES = {
    'pending': Order.PENDING,
    'in progress': Order.IN_PROGRESS,
    'in-progress': Order.IN_PROGRESS,
    'in_progress': Order.IN_PROGRESS,
    'processing': Order.IN_PROGRESS,
    'delivered': Order.DELIVERED,
}

CENT = Decimal('0.01')


def money(value):
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def cart_total(items):
    return money(sum((money(i['price']) * int(i['quantity']) for i in items), Decimal('0')))


def normalize_status(value):
    """Map a client supplied status to its canonical value.

    Raises ValidationFailed for anything that is not a known status.
    """
    if not isinstance(value, str):
        raise ValidationFailed('Invalid status')
    status = _STATUS_ALIASES.get(value.strip().lower())
    if status is None:
        raise ValidationFailed(f"Invalid status: {value}")
    return status


def next_status(status):
    """Return the status that follows ``status``, or None when it is terminal."""
    try:
        index = STATUS_FLOW.index(status)
    except ValueError:
        return None
    if index + 1 < len(STATUS_FLOW):
        return STATUS_FLOW[index + 1]
    return None


def is_terminal(status):
    return status == TERMINAL_STATUS


def parse_object_id(value, label='Object'):
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        raise NotFound(f"{label} {value} not found")


def get_or_404(document_cls, value, label=None):
    label = label or document_cls.__name__
    doc = document_cls.objects(id=parse_object_id(value, label)).first()
    if doc is None:
        raise NotFound(f"{label} {value} not found")
    return doc
