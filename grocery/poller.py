import logging
import threading

from django.conf import settings

from .utils import is_terminal

logger = logging.getLogger(__name__)


class OrderStatusPoller:
    """Re-fetch an order on a fixed interval until it is delivered.

    ``fetch`` takes an order id and returns something with a ``status``
    attribute. There is no backoff and no retry limit: a failed fetch is
    logged and the poller simply waits for the next tick. A failing
    ``on_change`` callback is logged the same way. ``stop()`` ends the loop
    early.
    """

    def __init__(self, fetch, interval=None, on_change=None):
        self.fetch = fetch
        if interval is None:
            interval = getattr(settings, 'ORDER_POLL_INTERVAL', 10)
        self.interval = interval
        self.on_change = on_change
        self.last_status = None
        self._stopped = threading.Event()
        self._thread = None

    def stop(self):
        self._stopped.set()

    @property
    def stopped(self):
        return self._stopped.is_set()

    def poll_once(self, order_id):
        try:
            order = self.fetch(order_id)
        except Exception as e:
            logger.warning('Fetching order %s failed, retrying in %ss: %s', order_id, self.interval, e)
            return None
        if order.status != self.last_status:
            self.last_status = order.status
            if self.on_change:
                try:
                    self.on_change(order)
                except Exception:
                    logger.exception('Status callback for order %s failed', order_id)
        return order

    def run(self, order_id):
        """Block until the order is delivered or the poller is stopped.

        Returns the last order fetched, or None if none was fetched.
        """
        last = None
        while not self.stopped:
            order = self.poll_once(order_id)
            if order is not None:
                last = order
                if is_terminal(order.status):
                    logger.debug('Order %s reached %s, polling stopped', order_id, order.status)
                    break
            self._stopped.wait(self.interval)
        return last

    def start(self, order_id):
        """Poll on a daemon thread; safe to call more than once."""
        if self._thread is not None and self._thread.is_alive():
            return self._thread
        self._stopped.clear()
        self._thread = threading.Thread(target=self.run, args=(order_id,), daemon=True)
        self._thread.start()
        return self._thread
