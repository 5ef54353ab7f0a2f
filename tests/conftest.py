from decimal import Decimal

import mongomock
import pytest
from django.core.cache import cache
from django.test import Client
from mongoengine import connect, disconnect

from grocery.auth import issue_token, register_user
from grocery.models import Order, Product, User


@pytest.fixture(scope='session', autouse=True)
def mongo():
    disconnect(alias='default')
    conn = connect('greengrocer_test', alias='default', host='mongodb://localhost',
                   mongo_client_class=mongomock.MongoClient)
    yield conn
    disconnect(alias='default')


@pytest.fixture(autouse=True)
def clean_collections(mongo):
    yield
    for doc in (Product, User, Order):
        doc.drop_collection()


@pytest.fixture(autouse=True)
def reset_rate_limits():
    # Every test client comes from 127.0.0.1, so counters would carry over
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def fast_hashers(settings):
    settings.PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']


@pytest.fixture
def make_product():
    def make(name='Fresh Apples', price='2.99', stock=5, category='fruit', **extra):
        product = Product(name=name, price=Decimal(price), stock=stock, category=category, **extra)
        product.save()
        return product
    return make


@pytest.fixture
def customer():
    return register_user('shopper@example.com', 'secret123')


@pytest.fixture
def other_customer():
    return register_user('neighbour@example.com', 'secret123')


@pytest.fixture
def admin():
    return register_user('admin@example.com', 'secret123', is_admin=True)


class ApiClient:
    """Django test client that speaks JSON and carries a bearer token."""

    def __init__(self, user=None):
        self.client = Client()
        self.token = issue_token(user) if user is not None else None

    def _headers(self):
        return {'HTTP_AUTHORIZATION': f'Bearer {self.token}'} if self.token else {}

    def get(self, path, data=None):
        return self.client.get(path, data, **self._headers())

    def post(self, path, payload=None):
        return self.client.post(path, payload or {}, content_type='application/json', **self._headers())

    def put(self, path, payload=None):
        return self.client.put(path, payload or {}, content_type='application/json', **self._headers())

    def delete(self, path):
        return self.client.delete(path, **self._headers())


@pytest.fixture
def anon_api():
    return ApiClient()


@pytest.fixture
def customer_api(customer):
    return ApiClient(customer)


@pytest.fixture
def admin_api(admin):
    return ApiClient(admin)


@pytest.fixture
def delivery():
    return {
        'customer_name': 'Ada Shopper',
        'contact_number': '555-0101',
        'delivery_address': '12 Orchard Lane',
    }


@pytest.fixture
def api_for():
    return ApiClient
