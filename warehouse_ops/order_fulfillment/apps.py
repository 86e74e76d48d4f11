from django.apps import AppConfig


class OrderFulfillmentConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'order_fulfillment'
    verbose_name = 'Order Fulfillment'

    def ready(self):
        from .services.registry import FulfillmentServices

        self.services = FulfillmentServices.from_settings()
