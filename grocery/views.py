import json
import logging
import math
from functools import wraps

from django.conf import settings
from django.core.exceptions import RequestDataTooBig
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods
from django_ratelimit.decorators import ratelimit
from django_ratelimit.exceptions import Ratelimited
from mongoengine.queryset.visitor import Q

from . import services
from .auth import (
    admin_required, authenticate, is_admin, issue_token, register_user, token_required,
    user_for_request, user_payload,
)
from .cart import Cart
from .exceptions import (
    NotFound, PayloadTooLarge, PermissionDenied, StoreError, TooManyRequests, ValidationFailed,
)
from .forms import (
    CartLineForm, CartQuantityForm, CheckoutForm, LoginForm, OrderLineForm, ProductForm,
    RegisterForm, StatusForm,
)
from .models import CATEGORIES, Product
from .presenters import OrderView, product_view
from .utils import get_or_404, normalize_status

logger = logging.getLogger(__name__)


def _api_rate(group, request):
    return settings.API_RATE_LIMIT


def api_view(*methods):
    """JSON endpoint: method gate, no CSRF, per-IP rate limit shared by the
    whole API, StoreError -> JSON error response."""
    def decorator(view_func):
        limited = ratelimit(group='grocery.api', key='ip', rate=_api_rate, block=True)(view_func)

        @csrf_exempt
        @require_http_methods(list(methods))
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            try:
                return limited(request, *args, **kwargs)
            except Ratelimited:
                logger.warning('Rate limit exceeded for %s', request.META.get('REMOTE_ADDR'))
                e = TooManyRequests('Too many requests, please try again later.')
                return JsonResponse(e.as_dict(), status=e.status)
            except StoreError as e:
                if e.status >= 500:
                    logger.error('%s %s failed: %s', request.method, request.path, e.message)
                else:
                    logger.info('%s %s rejected (%s): %s', request.method, request.path, e.status, e.message)
                return JsonResponse(e.as_dict(), status=e.status)
        return wrapper
    return decorator


def _json_body(request):
    try:
        raw = request.body
    except RequestDataTooBig:
        raise PayloadTooLarge('Request body is too large')
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except (ValueError, UnicodeDecodeError):
        raise ValidationFailed('Request body must be valid JSON')
    if not isinstance(data, dict):
        raise ValidationFailed('Request body must be a JSON object')
    return data


def _clean(form_class, data):
    form = form_class(data)
    if not form.is_valid():
        errors = {field: [str(m) for m in msgs] for field, msgs in form.errors.items()}
        first = next(iter(errors.values()))[0]
        raise ValidationFailed(first, errors=errors)
    return form.cleaned_data


def _positive_int(value, default):
    try:
        value = int(value)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def _order_lines(raw_items):
    if not isinstance(raw_items, list) or not raw_items:
        raise ValidationFailed('Order must contain at least one item')
    lines = []
    for raw in raw_items:
        if not isinstance(raw, dict):
            raise ValidationFailed('Each item needs a product_id and a quantity')
        cleaned = _clean(OrderLineForm, raw)
        lines.append((cleaned['product_id'], cleaned['quantity']))
    return lines


def _order_response(order, viewer, status=200):
    return JsonResponse(OrderView.for_viewer(order, viewer).as_dict(), status=status)


@api_view('GET')
def health(request):
    return JsonResponse({'status': 'ok', 'message': 'Server is running'})


# Catalog

@api_view('GET', 'POST')
def products(request):
    if request.method == 'POST':
        if not is_admin(user_for_request(request)):
            raise PermissionDenied('Admin access required')
        data = _clean(ProductForm, _json_body(request))
        product = services.save_product(Product(), data)
        logger.info('Product %s created', product.id)
        return JsonResponse(product_view(product), status=201)

    page = _positive_int(request.GET.get('page'), 1)
    limit = min(_positive_int(request.GET.get('limit'), settings.PRODUCTS_PAGE_SIZE), 100)
    q = Q()
    query = request.GET.get('q', '').strip()
    if query:
        q &= (Q(name__icontains=query) | Q(description__icontains=query))
    category = request.GET.get('category')
    if category:
        if category not in dict(CATEGORIES):
            raise ValidationFailed(f"Unknown category: {category}")
        q &= Q(category=category)
    qs = Product.objects(q).order_by('-created_at')
    total = qs.count()
    items = qs.skip((page - 1) * limit).limit(limit)
    return JsonResponse({
        'products': [product_view(p) for p in items],
        'current_page': page,
        'total_pages': math.ceil(total / limit),
        'total_products': total,
    })


@api_view('GET', 'PUT', 'DELETE')
def product_detail(request, product_id):
    if request.method == 'GET':
        return JsonResponse(product_view(get_or_404(Product, product_id)))

    # Authorize before the lookup: non-admins never learn which ids exist
    if not is_admin(user_for_request(request)):
        raise PermissionDenied('Admin access required')
    product = get_or_404(Product, product_id)
    if request.method == 'DELETE':
        product.delete()
        logger.info('Product %s deleted', product_id)
        return JsonResponse({'message': 'Product deleted successfully'})

    # Partial update: merge the body over the stored values, then validate the whole
    current = {
        'name': product.name,
        'description': product.description,
        'price': product.price,
        'image': product.image,
        'category': product.category,
        'stock': product.stock,
    }
    current.update(_json_body(request))
    data = _clean(ProductForm, current)
    services.save_product(product, data)
    logger.info('Product %s updated', product.id)
    return JsonResponse(product_view(product))


# Accounts

@api_view('POST')
def register(request):
    data = _clean(RegisterForm, _json_body(request))
    user = register_user(data['email'], data['password'])
    return JsonResponse({'token': issue_token(user), 'user': user_payload(user)}, status=201)


@api_view('POST')
def login(request):
    data = _clean(LoginForm, _json_body(request))
    user = authenticate(data['email'], data['password'])
    logger.info('User %s logged in', user.id)
    return JsonResponse({'token': issue_token(user), 'user': user_payload(user)})


@api_view('GET')
@token_required
def verify(request):
    return JsonResponse({'user': user_payload(request.account)})


# Orders

@api_view('GET', 'POST')
@token_required
def orders(request):
    user = request.account
    if request.method == 'GET':
        return JsonResponse([OrderView.for_viewer(o, user).as_dict() for o in services.list_orders_for(user)], safe=False)

    body = _json_body(request)
    customer = _clean(CheckoutForm, body)
    lines = _order_lines(body.get('items'))
    order = services.place_order(user, lines=lines, **customer)
    return _order_response(order, user, status=201)


@api_view('GET')
@token_required
def order_detail(request, order_id):
    order = services.get_order_for(request.account, order_id)
    return _order_response(order, request.account)


@api_view('PUT')
@token_required
def order_status(request, order_id):
    data = _clean(StatusForm, _json_body(request))
    order = services.advance_status(request.account, order_id, data['status'])
    return _order_response(order, request.account)


# Cart

@api_view('GET', 'DELETE')
def cart_detail(request):
    cart = Cart.load(request.session)
    if request.method == 'DELETE':
        cart.clear()
        cart.save(request.session)
    return JsonResponse(cart.as_dict())


@api_view('POST')
def cart_items(request):
    data = _clean(CartLineForm, _json_body(request))
    product = get_or_404(Product, data['product_id'])
    cart = Cart.load(request.session)
    added = cart.add(product, data.get('quantity') or 1)
    cart.save(request.session)
    body = cart.as_dict()
    body['added'] = added
    return JsonResponse(body)


@api_view('PUT', 'DELETE')
def cart_item_detail(request, product_id):
    cart = Cart.load(request.session)
    if product_id not in cart:
        raise NotFound(f"Product {product_id} is not in the cart")
    if request.method == 'DELETE':
        cart.remove(product_id)
    else:
        data = _clean(CartQuantityForm, _json_body(request))
        product = Product.objects(id=product_id).only('stock').first()
        cart.set_quantity(product_id, data['quantity'], stock=product.stock if product else None)
    cart.save(request.session)
    return JsonResponse(cart.as_dict())


@api_view('POST')
@token_required
def cart_checkout(request):
    cart = Cart.load(request.session)
    if not len(cart):
        raise ValidationFailed('Your cart is empty')
    customer = _clean(CheckoutForm, _json_body(request))
    order = services.place_order(request.account, lines=cart.order_lines(), **customer)
    cart.clear()
    cart.save(request.session)
    return _order_response(order, request.account, status=201)


# Admin

@api_view('GET')
@admin_required
def admin_orders(request):
    status = request.GET.get('status')
    qs = services.list_all_orders()
    if status:
        qs = qs.filter(status=normalize_status(status))
    return JsonResponse([OrderView.for_viewer(o, request.account).as_dict() for o in qs], safe=False)


@api_view('GET')
@admin_required
def admin_dashboard(request):
    return JsonResponse(services.dashboard_stats())
