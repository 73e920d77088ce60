"""
Tests for cart endpoints and checkout
"""
from decimal import Decimal
from unittest.mock import patch

from supermall.core.errors import ConflictError, NotFoundError, ValidationError
from supermall.domain.order import Order


class TestCartEndpoint:
    def test_requires_login(self, client):
        assert client.get('/api/v1/cart/').status_code == 401

    @patch('supermall.api.cart.CartService')
    def test_get_cart(self, mock_service, user_client):
        mock_service.return_value.get_cart.return_value = {'items': [], 'total': 0, 'count': 0}

        body = user_client.get('/api/v1/cart/').json()

        assert body['data'] == {'items': [], 'total': 0, 'count': 0}
        mock_service.return_value.get_cart.assert_called_once_with('user-1')

    @patch('supermall.api.cart.CartService')
    def test_add_returns_merged_quantity(self, mock_service, user_client):
        mock_service.return_value.add_item.return_value = 3

        response = user_client.post('/api/v1/cart/', json={'product_id': 'prod-1', 'quantity': 2})

        assert response.status_code == 201
        assert response.json()['data'] == {'product_id': 'prod-1', 'quantity': 3}
        mock_service.return_value.add_item.assert_called_once_with('user-1', 'prod-1', 2)

    def test_add_defaults_to_one(self, user_client):
        with patch('supermall.api.cart.CartService') as mock_service:
            mock_service.return_value.add_item.return_value = 1
            user_client.post('/api/v1/cart/', json={'product_id': 'prod-1'})

        mock_service.return_value.add_item.assert_called_once_with('user-1', 'prod-1', 1)

    def test_zero_quantity_add_rejected(self, user_client):
        response = user_client.post('/api/v1/cart/', json={'product_id': 'prod-1', 'quantity': 0})
        assert response.status_code == 422

    @patch('supermall.api.cart.CartService')
    def test_out_of_stock_add(self, mock_service, user_client):
        mock_service.return_value.add_item.side_effect = ValidationError('Wireless Headphones is out of stock')

        assert user_client.post('/api/v1/cart/', json={'product_id': 'prod-1'}).status_code == 400

    @patch('supermall.api.cart.CartService')
    def test_set_quantity(self, mock_service, user_client):
        response = user_client.put('/api/v1/cart/prod-1', json={'quantity': 4})

        assert response.json()['data'] == {'product_id': 'prod-1', 'quantity': 4}
        mock_service.return_value.update_quantity.assert_called_once_with('user-1', 'prod-1', 4)

    def test_negative_quantity_rejected(self, user_client):
        response = user_client.put('/api/v1/cart/prod-1', json={'quantity': -1})
        assert response.status_code == 422

    @patch('supermall.api.cart.CartService')
    def test_remove_missing_line(self, mock_service, user_client):
        mock_service.return_value.remove_item.side_effect = NotFoundError('Product is not in the cart')

        assert user_client.delete('/api/v1/cart/prod-9').status_code == 404


class TestCheckout:
    @patch('supermall.api.cart.CartService')
    def test_checkout(self, mock_service, user_client):
        mock_service.return_value.checkout.return_value = Order(
            id='order-1', user_id='user-1', customer_name='asha', total=Decimal('5398.20'),
        )

        response = user_client.post('/api/v1/cart/checkout')

        assert response.status_code == 201
        assert response.json()['data']['id'] == 'order-1'
        mock_service.return_value.checkout.assert_called_once_with('user-1', 'asha')

    @patch('supermall.api.cart.CartService')
    def test_stock_conflict(self, mock_service, user_client):
        mock_service.return_value.checkout.side_effect = ConflictError('Not enough stock for: Wireless Headphones')

        response = user_client.post('/api/v1/cart/checkout')

        assert response.status_code == 409
        assert 'Wireless Headphones' in response.json()['detail']

    @patch('supermall.api.cart.CartService')
    def test_empty_cart(self, mock_service, user_client):
        mock_service.return_value.checkout.side_effect = ValidationError('Your cart is empty')

        assert user_client.post('/api/v1/cart/checkout').status_code == 400
