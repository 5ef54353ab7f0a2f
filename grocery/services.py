"""Order placement and fulfilment status.

Stock is taken with a conditional decrement (``stock >= qty`` and ``$inc``
in one update) so two orders can never drive a product negative. Items are
processed in the order they were submitted; when one fails, every
decrement already applied for the request is put back before the error
reaches the caller.
"""
import logging
from decimal import Decimal

from mongoengine.errors import ValidationError as DocumentValidationError

from .auth import is_admin
from .exceptions import InsufficientStock, NotFound, PermissionDenied, ValidationFailed, Conflict
from .models import Order, OrderItem, Product, utcnow
from .utils import get_or_404, money, next_status, normalize_status, parse_object_id

logger = logging.getLogger(__name__)


def _take_stock(product_id, quantity):
    """Decrement stock if enough is left. Returns True when it was taken."""
    # Raw update: field validation would reject the negative $inc against min_value=0
    return Product.objects(id=product_id, stock__gte=quantity).update_one(
        __raw__={'$inc': {'stock': -quantity}, '$set': {'updated_at': utcnow()}},
    ) == 1


def _restore_stock(taken):
    for product_id, quantity in reversed(taken):
        Product.objects(id=product_id).update_one(inc__stock=quantity)
    if taken:
        logger.info('Restored stock for %d product(s) after a rejected order', len(taken))


def reserve_items(lines):
    """Take stock for each ``(product_id, quantity)`` line, all or nothing.

    Returns the snapshot items, the lines taken and the order total.
    """
    taken = []
    items = []
    total = Decimal('0')
    try:
        for product_id, quantity in lines:
            oid = parse_object_id(product_id, 'Product')
            product = Product.objects(id=oid).first()
            if product is None:
                raise NotFound(f"Product {product_id} not found")
            if not _take_stock(oid, quantity):
                # Re-read for the message: stock may have moved since the lookup
                current = Product.objects(id=oid).only('stock').first()
                available = current.stock if current else 0
                raise InsufficientStock(product.name, available)
            taken.append((oid, quantity))
            price = money(product.price)
            items.append(OrderItem(product_id=oid, name=product.name, price=price, quantity=quantity))
            total += price * quantity
    except Exception:
        _restore_stock(taken)
        raise
    return items, taken, money(total)


def place_order(user, customer_name, contact_number, delivery_address, lines, notes=''):
    """Validate ``lines`` against the catalog, take stock and write the order."""
    if not lines:
        raise ValidationFailed('Order must contain at least one item')
    for _, quantity in lines:
        if not isinstance(quantity, int) or quantity < 1:
            raise ValidationFailed('Quantity must be a positive integer')

    items, taken, total = reserve_items(lines)
    order = Order(
        user=user,
        customer_name=customer_name,
        contact_number=contact_number,
        delivery_address=delivery_address,
        notes=notes or None,
        items=items,
        total_amount=total,
        status=Order.PENDING,
    )
    try:
        order.save()
    except Exception:
        _restore_stock(taken)
        raise
    logger.info('Order %s placed by %s: %d item(s), total %s', order.id, user.id, len(items), total)
    return order


def list_orders_for(user):
    return Order.objects(user=user).order_by('-created_at')


def list_all_orders():
    return Order.objects().order_by('-created_at')


def get_order(order_id):
    return get_or_404(Order, order_id, 'Order')


def get_order_for(user, order_id):
    """Fetch an order the user may see: their own, or any when admin."""
    order = get_order(order_id)
    if not is_admin(user) and order.user.id != user.id:
        raise NotFound(f"Order {order_id} not found")
    return order


def advance_status(actor, order_id, requested):
    """Move an order one step along pending -> in-progress -> delivered."""
    if not is_admin(actor):
        raise PermissionDenied('Admin access required')
    status = normalize_status(requested)
    order = get_order(order_id)
    expected = next_status(order.status)
    if expected is None:
        raise Conflict(f"Order is already {order.status_label}; no further changes allowed")
    if status != expected:
        raise Conflict(f"Cannot change status from {order.status} to {status}; next status is {expected}")

    # Keyed on the current status so a concurrent update of the same step loses
    updated = Order.objects(id=order.id, status=order.status).update_one(
        set__status=status, set__updated_at=utcnow(),
    )
    if not updated:
        raise Conflict('Order status changed concurrently; reload and try again')
    order.reload()
    logger.info('Order %s moved to %s by %s', order.id, order.status, actor.id)
    return order


def dashboard_stats():
    counts = {status: Order.objects(status=status).count() for status, _ in Order.ORDER_STATUS}
    revenue = sum((money(o.total_amount) for o in Order.objects().only('total_amount')), Decimal('0'))
    return {
        'total_orders': sum(counts.values()),
        'by_status': counts,
        'revenue': str(money(revenue)),
        'total_products': Product.objects.count(),
        'out_of_stock': Product.objects(stock=0).count(),
    }


def save_product(product, data):
    for field, value in data.items():
        setattr(product, field, value)
    product.updated_at = utcnow()
    try:
        product.save()
    except DocumentValidationError as e:
        raise ValidationFailed('Invalid product', errors=e.to_dict())
    return product
