import os
from pathlib import Path
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

# Load environment variables from .env if present
load_dotenv(BASE_DIR / '.env')

SECRET_KEY = os.getenv('DJANGO_SECRET_KEY', 'dev-secret-key-change')
DEBUG = os.getenv('DEBUG', '1') == '1'
ALLOWED_HOSTS = os.getenv('ALLOWED_HOSTS', '*').split(',')

INSTALLED_APPS = [
    'django.contrib.sessions',
    'corsheaders',
    'grocery.apps.GroceryConfig',
]

MIDDLEWARE = [
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.gzip.GZipMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'greengrocer.urls'

WSGI_APPLICATION = 'greengrocer.wsgi.application'

# All application data lives in MongoDB through MongoEngine; no SQL database
DATABASES = {}

# The cart is kept in a signed cookie so sessions need no database either
SESSION_ENGINE = 'django.contrib.sessions.backends.signed_cookies'
SESSION_COOKIE_HTTPONLY = True

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.PBKDF2PasswordHasher',
    'django.contrib.auth.hashers.PBKDF2SHA1PasswordHasher',
]

# The storefront SPA runs on its own origin and sends bearer tokens
CORS_ALLOWED_ORIGINS = os.getenv(
    'CORS_ALLOWED_ORIGINS',
    'http://localhost:3000,http://localhost:3001,http://localhost:3003',
).split(',')
CORS_ALLOW_CREDENTIALS = True
CORS_ALLOW_METHODS = ['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS']
CORS_ALLOW_HEADERS = ['content-type', 'authorization']

# JSON bodies up to 10 MB
DATA_UPLOAD_MAX_MEMORY_SIZE = 10 * 1024 * 1024

# Rate limit counters live in the cache; use a shared backend (redis, memcached) with several workers
CACHES = {
    'default': {
        'BACKEND': os.getenv('CACHE_BACKEND', 'django.core.cache.backends.locmem.LocMemCache'),
        'LOCATION': os.getenv('CACHE_LOCATION', 'greengrocer'),
    },
}

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# MongoEngine configuration
MONGODB_NAME = os.getenv('MONGODB_NAME', 'greengrocer')
MONGODB_HOST = os.getenv('MONGODB_URI', 'mongodb://localhost:27017/greengrocer')
MONGODB_ALIAS = 'default'


def _int_env(name, default):
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


# Bearer tokens
AUTH_TOKEN_MAX_AGE = _int_env('AUTH_TOKEN_MAX_AGE', 24 * 60 * 60)
AUTH_TOKEN_SALT = 'grocery.auth.token'

# Catalog
PRODUCTS_PAGE_SIZE = _int_env('PRODUCTS_PAGE_SIZE', 10)

# Order status poller
ORDER_POLL_INTERVAL = _int_env('ORDER_POLL_INTERVAL', 10)

# Requests per IP across the whole API
API_RATE_LIMIT = os.getenv('API_RATE_LIMIT', '100/15m')
RATELIMIT_ENABLE = os.getenv('RATELIMIT_ENABLE', '1') == '1'

LOG_LEVEL = os.getenv('LOG_LEVEL', 'DEBUG' if DEBUG else 'INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '%(asctime)s %(levelname)s %(name)s: %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'grocery': {
            'level': LOG_LEVEL,
        },
        'django.request': {
            'level': 'WARNING',
        },
    },
}
