"""Email/password accounts and signed bearer tokens."""
import logging
from functools import wraps

from django.conf import settings
from django.contrib.auth.hashers import check_password, make_password
from django.core import signing
from mongoengine.errors import NotUniqueError

from .exceptions import AuthenticationFailed, Conflict, PermissionDenied
from .models import User

logger = logging.getLogger(__name__)


def normalize_email(email):
    return (email or '').strip().lower()


def register_user(email, password, is_admin=False):
    email = normalize_email(email)
    if User.objects(email=email).first():
        raise Conflict('User already exists')
    user = User(email=email, password=make_password(password), is_admin=is_admin)
    try:
        user.save()
    except NotUniqueError:
        raise Conflict('User already exists')
    logger.info('Registered user %s', user.id)
    return user


def authenticate(email, password):
    user = User.objects(email=normalize_email(email)).first()
    if not user or not check_password(password, user.password):
        raise AuthenticationFailed('Invalid credentials')
    return user


def issue_token(user):
    claims = {'uid': str(user.id), 'admin': bool(user.is_admin)}
    return signing.dumps(claims, salt=settings.AUTH_TOKEN_SALT, compress=True)


def read_token(token):
    """Return the claims carried by ``token``; expired or tampered tokens fail."""
    try:
        return signing.loads(token, salt=settings.AUTH_TOKEN_SALT, max_age=settings.AUTH_TOKEN_MAX_AGE)
    except signing.SignatureExpired:
        raise AuthenticationFailed('Token expired')
    except signing.BadSignature:
        raise AuthenticationFailed('Invalid token')


def bearer_token(request):
    header = request.META.get('HTTP_AUTHORIZATION', '')
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    return token.strip()


def user_for_request(request):
    token = bearer_token(request)
    if not token:
        raise AuthenticationFailed('Authentication token required')
    claims = read_token(token)
    user = User.objects(id=claims.get('uid')).first()
    if user is None:
        raise AuthenticationFailed('Invalid token')
    # Admin-only routes trust the claim only while the stored flag still agrees
    user.token_admin = bool(claims.get('admin')) and user.is_admin
    return user


def token_required(view_func):
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        request.account = user_for_request(request)
        return view_func(request, *args, **kwargs)
    return wrapper


def is_admin(user):
    return user is not None and getattr(user, 'token_admin', user.is_admin)


def admin_required(view_func):
    @wraps(view_func)
    @token_required
    def wrapper(request, *args, **kwargs):
        if not is_admin(request.account):
            raise PermissionDenied('Admin access required')
        return view_func(request, *args, **kwargs)
    return wrapper


def user_payload(user):
    return {'id': str(user.id), 'email': user.email, 'is_admin': user.is_admin}
