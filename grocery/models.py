import datetime
from decimal import ROUND_HALF_UP

from mongoengine import (
    Document, EmbeddedDocument, StringField, IntField, DecimalField, DateTimeField,
    BooleanField, EmailField, ReferenceField, ObjectIdField, EmbeddedDocumentListField,
)

CATEGORIES = (
    ('fruit', 'Fruit'),
    ('vegetable', 'Vegetable'),
)

def utcnow():
    return datetime.datetime.now(datetime.timezone.utc)


class Product(Document):
    name = StringField(max_length=200, required=True)
    description = StringField(default='')
    price = DecimalField(min_value=0, precision=2, rounding=ROUND_HALF_UP, required=True)
    image = StringField(default='')  # URL
    category = StringField(max_length=20, choices=[c[0] for c in CATEGORIES], required=True)
    stock = IntField(min_value=0, default=0)
    created_at = DateTimeField(default=utcnow)
    updated_at = DateTimeField(default=utcnow)

    meta = {'collection': 'grocery_products', 'indexes': ['category', 'name', '-created_at']}

    def __str__(self):
        return self.name


class User(Document):
    email = EmailField(max_length=150, required=True, unique=True)
    password = StringField(required=True)  # hashed, see grocery.auth
    is_admin = BooleanField(default=False)
    created_at = DateTimeField(default=utcnow)

    meta = {'collection': 'grocery_users'}

    def __str__(self):
        return self.email


class OrderItem(EmbeddedDocument):
    """Copy of a product as it was when the order was placed."""
    product_id = ObjectIdField(required=True)
    name = StringField(required=True)
    price = DecimalField(min_value=0, precision=2, rounding=ROUND_HALF_UP, required=True)
    quantity = IntField(min_value=1, required=True)

    @property
    def subtotal(self):
        return self.price * self.quantity


class Order(Document):
    PENDING = 'pending'
    IN_PROGRESS = 'in-progress'
    DELIVERED = 'delivered'

    ORDER_STATUS = (
        (PENDING, 'Pending'),
        (IN_PROGRESS, 'In Progress'),
        (DELIVERED, 'Delivered'),
    )

    user = ReferenceField(User, required=True)
    customer_name = StringField(max_length=100, required=True)
    contact_number = StringField(max_length=30, required=True)
    delivery_address = StringField(required=True)
    notes = StringField()
    items = EmbeddedDocumentListField(OrderItem, required=True)
    total_amount = DecimalField(min_value=0, precision=2, rounding=ROUND_HALF_UP, required=True)
    status = StringField(max_length=20, choices=[s[0] for s in ORDER_STATUS], default=PENDING)
    created_at = DateTimeField(default=utcnow)
    updated_at = DateTimeField(default=utcnow)

    meta = {'collection': 'grocery_orders', 'indexes': ['user', 'status', '-created_at']}

    @property
    def status_label(self):
        return dict(self.ORDER_STATUS).get(self.status, self.status)

    def __str__(self):
        return f"Order {self.id} ({self.status})"
