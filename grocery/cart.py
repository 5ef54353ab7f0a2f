"""Shopping cart kept in the visitor's session.

``Cart`` owns the lines and all the arithmetic on them. Only ``load`` and
``save`` know how the cart is laid out in the session.
"""
from dataclasses import dataclass, asdict

from .utils import cart_total, money

SESSION_KEY = 'cart'


@dataclass
class CartLine:
    product_id: str
    name: str
    price: str
    quantity: int
    image: str = ''

    @property
    def subtotal(self):
        return money(self.price) * self.quantity


class Cart:

    def __init__(self, lines=None):
        self._lines = {line.product_id: line for line in (lines or [])}

    @classmethod
    def load(cls, session):
        raw = session.get(SESSION_KEY) or []
        lines = []
        for entry in raw:
            try:
                lines.append(CartLine(
                    product_id=str(entry['product_id']),
                    name=entry.get('name', ''),
                    price=str(entry.get('price', '0')),
                    quantity=int(entry['quantity']),
                    image=entry.get('image', ''),
                ))
            except (KeyError, TypeError, ValueError):
                # Stale or hand-edited entries are dropped
                continue
        return cls(line for line in lines if line.quantity > 0)

    def save(self, session):
        session[SESSION_KEY] = [asdict(line) for line in self._lines.values()]
        session.modified = True

    def __iter__(self):
        return iter(self._lines.values())

    def __len__(self):
        return len(self._lines)

    def __contains__(self, product_id):
        return str(product_id) in self._lines

    def get(self, product_id):
        return self._lines.get(str(product_id))

    def add(self, product, quantity=1):
        """Add ``quantity`` of ``product``; the line never exceeds current stock.

        Returns the quantity actually added.
        """
        pid = str(product.id)
        line = self._lines.get(pid)
        current = line.quantity if line else 0
        addable = max(0, min(int(quantity), int(product.stock or 0) - current))
        if addable <= 0:
            return 0
        if line is None:
            line = CartLine(product_id=pid, name=product.name, price=str(money(product.price)),
                            quantity=0, image=product.image or '')
            self._lines[pid] = line
        line.quantity += addable
        # Refresh the displayed price; the order itself always uses the catalog price
        line.price = str(money(product.price))
        return addable

    def set_quantity(self, product_id, quantity, stock=None):
        pid = str(product_id)
        if pid not in self._lines:
            return False
        quantity = int(quantity)
        if stock is not None:
            quantity = min(quantity, int(stock))
        if quantity <= 0:
            del self._lines[pid]
        else:
            self._lines[pid].quantity = quantity
        return True

    def remove(self, product_id):
        return self._lines.pop(str(product_id), None) is not None

    def clear(self):
        self._lines.clear()

    @property
    def total(self):
        return cart_total([{'price': l.price, 'quantity': l.quantity} for l in self._lines.values()])

    def order_lines(self):
        return [(line.product_id, line.quantity) for line in self._lines.values()]

    def as_dict(self):
        return {
            'items': [dict(asdict(line), subtotal=str(line.subtotal)) for line in self._lines.values()],
            'total': str(self.total),
            'count': sum(line.quantity for line in self._lines.values()),
        }
