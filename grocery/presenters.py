"""JSON shapes for documents returned by the API.

Order views carry capability flags worked out from the viewer, so a client
shows a status control when ``can_update_status`` is set instead of
checking roles itself.
"""
from .auth import is_admin
from .utils import is_terminal, money, next_status


def _iso(value):
    return value.isoformat() if value else None


def product_view(product):
    return {
        'id': str(product.id),
        'name': product.name,
        'description': product.description or '',
        'price': str(money(product.price)),
        'image': product.image or '',
        'category': product.category,
        'stock': product.stock,
        'created_at': _iso(product.created_at),
        'updated_at': _iso(product.updated_at),
    }


class OrderView:

    def __init__(self, order, can_update_status=False, include_owner=False):
        self.order = order
        self.can_update_status = can_update_status and not is_terminal(order.status)
        self.include_owner = include_owner

    @classmethod
    def for_viewer(cls, order, viewer):
        admin = is_admin(viewer)
        return cls(order, can_update_status=admin, include_owner=admin)

    @property
    def next_status(self):
        return next_status(self.order.status) if self.can_update_status else None

    def as_dict(self):
        order = self.order
        data = {
            'id': str(order.id),
            'customer_name': order.customer_name,
            'contact_number': order.contact_number,
            'delivery_address': order.delivery_address,
            'notes': order.notes or '',
            'items': [{
                'product_id': str(item.product_id),
                'name': item.name,
                'price': str(money(item.price)),
                'quantity': item.quantity,
                'subtotal': str(money(item.subtotal)),
            } for item in order.items],
            'total_amount': str(money(order.total_amount)),
            'status': order.status,
            'status_label': order.status_label,
            'created_at': _iso(order.created_at),
            'updated_at': _iso(order.updated_at),
            'can_update_status': self.can_update_status,
            'next_status': self.next_status,
        }
        if self.include_owner:
            owner = order.user
            data['user'] = {'id': str(owner.id), 'email': owner.email} if owner else None
        return data
