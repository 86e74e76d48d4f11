"""
Tests for concurrent claims, reservations and cancellations.

These run against a real database connection per thread, so they use
TransactionTestCase and commit for real.
"""

import threading
from django.db import connection
from django.test import TransactionTestCase

from ..models import Order, OrderStatus, PickTask
from ..services import get_services
from ..exceptions import (
    ActiveOrderLimitException, BusinessException, InventoryUnavailableException,
    OrderAlreadyClaimedException
)
from .fixtures import create_product, create_user, stock_of


def run_concurrently(calls):
    """
    Start every call at the same moment and collect what each returned.

    Returns:
        List of (result, exception) tuples in call order
    """
    barrier = threading.Barrier(len(calls))
    outcomes = [None] * len(calls)

    def worker(index, call):
        try:
            barrier.wait()
            outcomes[index] = (call(), None)
        except BusinessException as exc:
            outcomes[index] = (None, exc)
        finally:
            connection.close()

    threads = [threading.Thread(target=worker, args=(index, call)) for index, call in enumerate(calls)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)
    return outcomes


class ConcurrencyTest(TransactionTestCase):
    """Test invariants hold when requests race."""

    def setUp(self):
        """Set up test data."""
        self.services = get_services()
        create_product('SKU-001', 'A-01-01', stock=100)

    def _create_order(self, quantity=1):
        return self.services.orders.create_order(
            customer_id='CUST-1', items=[{'sku': 'SKU-001', 'quantity': quantity}]
        )

    def test_only_one_picker_wins_a_claim(self):
        order = self._create_order()
        pickers = [create_user(f'picker{n}') for n in range(4)]

        outcomes = run_concurrently([
            lambda picker=picker: self.services.claims.claim_order(str(order.id), picker)
            for picker in pickers
        ])

        winners = [result for result, error in outcomes if error is None]
        losers = [error for result, error in outcomes if error is not None]
        self.assertEqual(len(winners), 1)
        self.assertEqual(len(losers), 3)
        for error in losers:
            self.assertIsInstance(error, OrderAlreadyClaimedException)
            self.assertIn(winners[0].picker.username, str(error))

        order.refresh_from_db()
        self.assertEqual(order.status, OrderStatus.PICKING)
        self.assertEqual(order.picker, winners[0].picker)
        self.assertEqual(PickTask.objects.filter(order=order).count(), 1)

    def test_limit_holds_under_parallel_claims(self):
        """Test six simultaneous claims by one picker leave exactly five held."""
        picker = create_user('picker')
        orders = [self._create_order() for _ in range(6)]

        outcomes = run_concurrently([
            lambda order=order: self.services.claims.claim_order(str(order.id), picker)
            for order in orders
        ])

        errors = [error for result, error in outcomes if error is not None]
        self.assertEqual(len(errors), 1)
        self.assertIsInstance(errors[0], ActiveOrderLimitException)
        self.assertEqual(Order.objects.filter(picker=picker, status=OrderStatus.PICKING).count(), 5)

    def test_reservations_never_oversell(self):
        """Test racing orders cannot reserve more than is on hand."""
        outcomes = run_concurrently([lambda: self._create_order(quantity=30) for _ in range(5)])

        created = [result for result, error in outcomes if error is None]
        errors = [error for result, error in outcomes if error is not None]
        self.assertEqual(len(created), 3)
        self.assertEqual(len(errors), 2)
        for error in errors:
            self.assertIsInstance(error, InventoryUnavailableException)
        self.assertEqual(stock_of('SKU-001', 'A-01-01'), (100, 90))
        self.assertEqual(Order.objects.count(), 3)

    def test_create_and_cancel_conserve_stock(self):
        """Test interleaved creates and cancels leave reserved equal to live orders."""
        supervisor = create_user('supervisor')
        existing = [self._create_order(quantity=5) for _ in range(4)]

        calls = [lambda: self._create_order(quantity=5) for _ in range(4)]
        calls += [lambda order=order: self.services.orders.cancel_order(str(order.id), supervisor) for order in existing]
        calls += [lambda order=existing[0]: self.services.orders.cancel_order(str(order.id), supervisor)]
        outcomes = run_concurrently(calls)

        self.assertTrue(all(error is None for result, error in outcomes))
        live = Order.objects.exclude(status=OrderStatus.CANCELLED)
        self.assertEqual(live.count(), 4)
        self.assertEqual(stock_of('SKU-001', 'A-01-01'), (100, 20))
