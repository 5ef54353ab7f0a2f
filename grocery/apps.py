import logging

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class GroceryConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'grocery'
    verbose_name = 'Grocery storefront'

    def ready(self):
        # Products, users and orders all live in MongoDB; connect lazily on first query
        from mongoengine import register_connection
        alias = getattr(settings, 'MONGODB_ALIAS', 'default')
        register_connection(
            alias=alias,
            host=getattr(settings, 'MONGODB_HOST', 'mongodb://localhost:27017/greengrocer'),
            name=getattr(settings, 'MONGODB_NAME', 'greengrocer'),
            tz_aware=True,
        )
        logger.debug('Registered MongoDB connection %r for database %s', alias, settings.MONGODB_NAME)
