from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from grocery.exceptions import NotFound
from grocery.poller import OrderStatusPoller
from grocery.services import get_order
from grocery.utils import is_terminal


class Command(BaseCommand):
    help = 'Follow an order until it is delivered'

    def add_arguments(self, parser):
        parser.add_argument('order_id')
        parser.add_argument('--interval', type=float, default=settings.ORDER_POLL_INTERVAL,
                            help='Seconds between checks')

    def handle(self, *args, **options):
        order_id = options['order_id']
        try:
            get_order(order_id)
        except NotFound as e:
            raise CommandError(e.message)

        def report(order):
            self.stdout.write(f'Order {order.id}: {order.status_label}')

        poller = OrderStatusPoller(get_order, interval=options['interval'], on_change=report)
        try:
            order = poller.run(order_id)
        except KeyboardInterrupt:
            poller.stop()
            self.stdout.write('Stopped')
            return
        if order is not None and is_terminal(order.status):
            self.stdout.write(self.style.SUCCESS(f'Order {order.id} delivered'))
