from decimal import Decimal

import pytest
from bson import ObjectId

from grocery import services
from grocery.exceptions import InsufficientStock, NotFound, ValidationFailed
from grocery.models import Order, Product


def _place(user, delivery, lines, **extra):
    return services.place_order(user, lines=lines, **delivery, **extra)


def _stock(product):
    return Product.objects.get(id=product.id).stock


def test_place_order_totals_and_decrements_stock(customer, delivery, make_product):
    apples = make_product(price='2.99', stock=5)

    order = _place(customer, delivery, [(str(apples.id), 2)])

    assert order.id is not None
    assert order.status == Order.PENDING
    assert order.total_amount == Decimal('5.98')
    assert _stock(apples) == 3
    assert order.created_at is not None


def test_total_is_sum_of_lines(customer, delivery, make_product):
    apples = make_product(price='2.99', stock=10)
    carrots = make_product(name='Fresh Carrots', price='1.49', stock=10, category='vegetable')

    order = _place(customer, delivery, [(str(apples.id), 3), (str(carrots.id), 4)])

    assert order.total_amount == Decimal('14.93')
    assert [(i.name, i.quantity) for i in order.items] == [('Fresh Apples', 3), ('Fresh Carrots', 4)]
    assert _stock(apples) == 7
    assert _stock(carrots) == 6


def test_quantity_over_stock_is_rejected(customer, delivery, make_product):
    apples = make_product(stock=5)

    with pytest.raises(InsufficientStock) as exc:
        _place(customer, delivery, [(str(apples.id), 10)])

    assert exc.value.available == 5
    assert 'Available: 5' in exc.value.message
    assert _stock(apples) == 5
    assert Order.objects.count() == 0


def test_unknown_product_is_rejected(customer, delivery, make_product):
    apples = make_product(stock=5)
    missing = str(ObjectId())

    with pytest.raises(NotFound) as exc:
        _place(customer, delivery, [(str(apples.id), 1), (missing, 1)])

    assert missing in exc.value.message
    assert _stock(apples) == 5
    assert Order.objects.count() == 0


def test_malformed_product_id_is_not_found(customer, delivery):
    with pytest.raises(NotFound):
        _place(customer, delivery, [('not-an-id', 1)])


def test_later_shortfall_restores_earlier_items(customer, delivery, make_product):
    apples = make_product(stock=5)
    carrots = make_product(name='Fresh Carrots', stock=1, category='vegetable')

    with pytest.raises(InsufficientStock):
        _place(customer, delivery, [(str(apples.id), 3), (str(carrots.id), 2)])

    assert _stock(apples) == 5
    assert _stock(carrots) == 1
    assert Order.objects.count() == 0


def test_exact_stock_can_be_ordered(customer, delivery, make_product):
    apples = make_product(stock=5)
    _place(customer, delivery, [(str(apples.id), 5)])
    assert _stock(apples) == 0

    with pytest.raises(InsufficientStock) as exc:
        _place(customer, delivery, [(str(apples.id), 1)])
    assert exc.value.available == 0


def test_take_stock_respects_non_negative_stock(make_product):
    apples = make_product(stock=3)

    assert services._take_stock(apples.id, 3) is True
    assert services._take_stock(apples.id, 1) is False
    assert _stock(apples) == 0


def test_snapshot_survives_catalog_price_change(customer, delivery, make_product):
    apples = make_product(price='2.99', stock=5)
    order = _place(customer, delivery, [(str(apples.id), 2)])

    apples.price = Decimal('9.99')
    apples.name = 'Premium Apples'
    apples.save()

    stored = Order.objects.get(id=order.id)
    assert stored.total_amount == Decimal('5.98')
    assert stored.items[0].price == Decimal('2.99')
    assert stored.items[0].name == 'Fresh Apples'


def test_empty_order_is_rejected(customer, delivery):
    with pytest.raises(ValidationFailed):
        _place(customer, delivery, [])


def test_zero_quantity_is_rejected(customer, delivery, make_product):
    apples = make_product(stock=5)
    with pytest.raises(ValidationFailed):
        _place(customer, delivery, [(str(apples.id), 0)])
    assert _stock(apples) == 5


def test_get_order_for_hides_other_customers_orders(customer, other_customer, admin, delivery, make_product):
    apples = make_product(stock=5)
    order = _place(customer, delivery, [(str(apples.id), 1)])

    assert services.get_order_for(customer, str(order.id)).id == order.id
    assert services.get_order_for(admin, str(order.id)).id == order.id
    with pytest.raises(NotFound):
        services.get_order_for(other_customer, str(order.id))


# HTTP

def test_post_order(customer_api, delivery, make_product):
    apples = make_product(price='2.99', stock=5)

    response = customer_api.post('/api/orders', dict(delivery, notes='Leave at the door', items=[
        {'product_id': str(apples.id), 'quantity': 2},
    ]))

    assert response.status_code == 201
    body = response.json()
    assert body['total_amount'] == '5.98'
    assert body['status'] == 'pending'
    assert body['status_label'] == 'Pending'
    assert body['notes'] == 'Leave at the door'
    assert body['items'][0]['subtotal'] == '5.98'
    assert body['can_update_status'] is False
    assert _stock(apples) == 3


def test_post_order_insufficient_stock(customer_api, delivery, make_product):
    apples = make_product(stock=5)

    response = customer_api.post('/api/orders', dict(delivery, items=[
        {'product_id': str(apples.id), 'quantity': 10},
    ]))

    assert response.status_code == 409
    assert 'Available: 5' in response.json()['message']
    assert _stock(apples) == 5


def test_post_order_unknown_product(customer_api, delivery):
    response = customer_api.post('/api/orders', dict(delivery, items=[
        {'product_id': str(ObjectId()), 'quantity': 1},
    ]))
    assert response.status_code == 404


def test_post_order_requires_delivery_details(customer_api, make_product):
    apples = make_product(stock=5)
    response = customer_api.post('/api/orders', {'items': [{'product_id': str(apples.id), 'quantity': 1}]})

    assert response.status_code == 400
    assert 'delivery_address' in response.json()['errors']
    assert _stock(apples) == 5


def test_post_order_requires_items(customer_api, delivery):
    response = customer_api.post('/api/orders', dict(delivery, items=[]))
    assert response.status_code == 400


def test_post_order_requires_token(anon_api, delivery, make_product):
    apples = make_product(stock=5)
    response = anon_api.post('/api/orders', dict(delivery, items=[{'product_id': str(apples.id), 'quantity': 1}]))

    assert response.status_code == 401
    assert _stock(apples) == 5


def test_list_orders_returns_only_own(customer, other_customer, customer_api, delivery, make_product):
    apples = make_product(stock=10)
    mine = _place(customer, delivery, [(str(apples.id), 1)])
    _place(other_customer, delivery, [(str(apples.id), 1)])

    response = customer_api.get('/api/orders')

    assert response.status_code == 200
    assert [o['id'] for o in response.json()] == [str(mine.id)]


def test_order_detail(customer, customer_api, other_customer, api_for, delivery, make_product):
    apples = make_product(stock=10)
    order = _place(customer, delivery, [(str(apples.id), 1)])

    assert customer_api.get(f'/api/orders/{order.id}').status_code == 200
    assert api_for(other_customer).get(f'/api/orders/{order.id}').status_code == 404
    assert customer_api.get('/api/orders/nope').status_code == 404


def test_malformed_json_body(customer_api):
    response = customer_api.client.post('/api/orders', '{not json', content_type='application/json',
                                        **customer_api._headers())
    assert response.status_code == 400
