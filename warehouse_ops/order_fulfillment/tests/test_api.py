"""
Tests for the Order Fulfillment REST API.
"""

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from ..models import OrderStatus, PickTaskStatus
from ..services import get_services
from .fixtures import create_product, create_user, stock_of


class OrderAPITest(TestCase):
    """Test order endpoints and the response envelope."""

    def setUp(self):
        """Set up test data."""
        self.picker = create_user('picker')
        self.rival = create_user('rival')
        self.client = APIClient()
        self.client.force_authenticate(user=self.picker)

        create_product('SKU-001', 'A-01-01', unit_price='12.00', stock=10, barcode='9400000000011')
        create_product('SKU-002', 'B-02-01', unit_price='3.50', stock=10)

    def _create_order(self, **extra):
        payload = {
            'customer_id': 'CUST-1',
            'customer_name': 'Aroha Ngata',
            'items': [{'sku': 'SKU-001', 'quantity': 2}, {'sku': 'SKU-002', 'quantity': 4}],
        }
        payload.update(extra)
        return self.client.post('/api/orders/', payload, format='json')

    def test_authentication_required(self):
        response = APIClient().get('/api/orders/')
        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))
        self.assertFalse(response.data['success'])

    def test_api_root(self):
        response = self.client.get('/api/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['endpoints']['order_fulfillment']['orders'], '/api/orders/')

    def test_create_order(self):
        response = self._create_order(priority='HIGH')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['success'])
        data = response.data['data']
        self.assertEqual(data['status'], OrderStatus.PENDING)
        self.assertEqual(data['priority'], 'HIGH')
        self.assertEqual(data['subtotal'], '38.00')
        self.assertEqual(len(data['items']), 2)
        self.assertEqual(data['created_by_name'], 'picker')
        self.assertEqual(stock_of('SKU-001', 'A-01-01'), (10, 2))

    def test_create_order_validation_error(self):
        response = self._create_order(items=[{'sku': 'SKU-001', 'quantity': 0}])

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        self.assertEqual(response.data['error']['code'], 'VALIDATION_ERROR')
        self.assertIn('items', response.data['error']['details'])

    def test_create_order_unknown_sku(self):
        response = self._create_order(items=[{'sku': 'NOPE', 'quantity': 1}])
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error']['code'], 'NOT_FOUND')

    def test_create_order_out_of_stock(self):
        response = self._create_order(items=[{'sku': 'SKU-002', 'quantity': 11}])

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        error = response.data['error']
        self.assertEqual(error['code'], 'INVENTORY_UNAVAILABLE')
        self.assertEqual(error['details']['available_quantity'], 10)

    def test_retrieve_unknown_order(self):
        response = self.client.get('/api/orders/00000000-0000-0000-0000-000000000000/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error']['code'], 'NOT_FOUND')

    def test_queue(self):
        self._create_order()
        self._create_order(priority='URGENT')

        response = self.client.get('/api/orders/', {'status': 'PENDING', 'limit': 1})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        self.assertEqual(data['total'], 2)
        self.assertEqual(data['limit'], 1)
        self.assertEqual(len(data['orders']), 1)
        self.assertEqual(data['orders'][0]['priority'], 'URGENT')

    def test_queue_rejects_bad_filter(self):
        response = self.client.get('/api/orders/', {'status': 'LOST'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['code'], 'VALIDATION_ERROR')

    def test_claim_and_conflict(self):
        order_id = self._create_order().data['data']['id']

        response = self.client.post(f'/api/orders/{order_id}/claim/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['status'], OrderStatus.PICKING)
        self.assertEqual(response.data['data']['picker_name'], 'picker')
        self.assertEqual(len(response.data['data']['pick_tasks']), 2)

        rival = APIClient()
        rival.force_authenticate(user=self.rival)
        response = rival.post(f'/api/orders/{order_id}/claim/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error']['code'], 'ORDER_ALREADY_CLAIMED')
        self.assertIn('already claimed by picker', response.data['error']['message'])

    def test_mine_and_unclaim(self):
        order_id = self._create_order().data['data']['id']
        self.client.post(f'/api/orders/{order_id}/claim/')

        response = self.client.get('/api/orders/mine/')
        self.assertEqual([order['id'] for order in response.data['data']], [order_id])

        response = self.client.post(f'/api/orders/{order_id}/unclaim/', {'reason': 'Shift over'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['status'], OrderStatus.PENDING)
        self.assertEqual(self.client.get('/api/orders/mine/').data['data'], [])

    def test_pick_through_to_shipping(self):
        """Test the picking and status endpoints drive an order to SHIPPED."""
        order_id = self._create_order().data['data']['id']
        self.client.post(f'/api/orders/{order_id}/claim/')

        next_task = self.client.get(f'/api/orders/{order_id}/next-task/').data['data']
        self.assertEqual(next_task['sku'], 'SKU-001')

        response = self.client.post(f"/api/pick-tasks/{next_task['id']}/start/")
        self.assertEqual(response.data['data']['status'], PickTaskStatus.IN_PROGRESS)

        response = self.client.post(
            f"/api/pick-tasks/{next_task['id']}/pick/",
            {'scanned_code': '9400000000011', 'bin_location': 'A-01-01', 'quantity': 2},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['status'], PickTaskStatus.COMPLETED)

        progress = self.client.get(f'/api/orders/{order_id}/progress/').data['data']
        self.assertEqual(progress['completed'], 1)
        self.assertEqual(progress['percentage'], 50)

        second = self.client.get(f'/api/orders/{order_id}/next-task/').data['data']
        response = self.client.post(f"/api/pick-tasks/{second['id']}/quantity/", {'quantity': 4}, format='json')
        self.assertEqual(response.data['data']['status'], PickTaskStatus.COMPLETED)
        self.assertIsNone(self.client.get(f'/api/orders/{order_id}/next-task/').data['data'])

        for new_status in ('PICKED', 'PACKING', 'PACKED', 'SHIPPED'):
            response = self.client.post(f'/api/orders/{order_id}/transition/', {'status': new_status}, format='json')
            self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
            self.assertEqual(response.data['data']['status'], new_status)

        self.assertEqual(stock_of('SKU-001', 'A-01-01'), (8, 0))

    def test_invalid_transition(self):
        order_id = self._create_order().data['data']['id']
        response = self.client.post(f'/api/orders/{order_id}/transition/', {'status': 'SHIPPED'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error']['code'], 'INVALID_TRANSITION')

    def test_cancel(self):
        order_id = self._create_order().data['data']['id']

        for _ in range(2):
            response = self.client.post(f'/api/orders/{order_id}/cancel/', {'reason': 'Duplicate'}, format='json')
            self.assertEqual(response.status_code, status.HTTP_200_OK)
            self.assertEqual(response.data['data']['status'], OrderStatus.CANCELLED)

        self.assertEqual(stock_of('SKU-002', 'B-02-01'), (10, 0))


class PickTaskAPITest(TestCase):
    """Test pick task endpoints."""

    def setUp(self):
        """Set up test data."""
        self.picker = create_user('picker')
        self.client = APIClient()
        self.client.force_authenticate(user=self.picker)
        create_product('SKU-001', 'A-01-01', stock=10)

        services = get_services()
        order = services.orders.create_order(customer_id='CUST-1', items=[{'sku': 'SKU-001', 'quantity': 3}])
        order = services.claims.claim_order(str(order.id), self.picker)
        self.task = order.pick_tasks.get()

    def test_skip_requires_reason(self):
        response = self.client.post(f'/api/pick-tasks/{self.task.id}/skip/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['code'], 'VALIDATION_ERROR')

    def test_skip_revert_and_undo(self):
        url = f'/api/pick-tasks/{self.task.id}'

        response = self.client.post(f'{url}/skip/', {'reason': 'Bin empty'}, format='json')
        self.assertEqual(response.data['data']['status'], PickTaskStatus.SKIPPED)

        response = self.client.post(f'{url}/revert-skip/')
        self.assertEqual(response.data['data']['status'], PickTaskStatus.PENDING)

        response = self.client.post(f'{url}/complete/')
        self.assertEqual(response.data['data']['picked_quantity'], 3)

        response = self.client.post(f'{url}/complete/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error']['code'], 'TASK_ALREADY_COMPLETED')

        response = self.client.post(f'{url}/undo/', {'reason': 'Wrong shelf'}, format='json')
        self.assertEqual(response.data['data']['status'], PickTaskStatus.PENDING)
        self.assertEqual(response.data['data']['picked_quantity'], 0)

    def test_wrong_scan(self):
        response = self.client.post(
            f'/api/pick-tasks/{self.task.id}/pick/',
            {'scanned_code': 'SKU-001', 'bin_location': 'Z-99-99'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['code'], 'VALIDATION_ERROR')

    def test_retrieve_task(self):
        response = self.client.get(f'/api/pick-tasks/{self.task.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['task_number'], self.task.task_number)


class InventoryAPITest(TestCase):
    """Test the availability endpoint."""

    def setUp(self):
        """Set up test data."""
        self.client = APIClient()
        self.client.force_authenticate(user=create_user('clerk'))
        create_product('SKU-001', 'A-01-01', stock=10)

    def test_availability(self):
        get_services().orders.create_order(customer_id='CUST-1', items=[{'sku': 'SKU-001', 'quantity': 4}])

        response = self.client.get('/api/inventory/availability/', {'sku': 'SKU-001', 'bin': 'A-01-01'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data'], {'sku': 'SKU-001', 'bin': 'A-01-01', 'available': 6})

    def test_availability_for_unstocked_bin(self):
        response = self.client.get('/api/inventory/availability/', {'sku': 'SKU-001', 'bin': 'Z-99-99'})
        self.assertEqual(response.data['data']['available'], 0)
