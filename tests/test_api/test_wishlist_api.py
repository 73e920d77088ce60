"""
Tests for wishlist endpoints, sharing and move-to-cart
"""
from decimal import Decimal
from unittest.mock import patch

from supermall.core.errors import NotFoundError, ValidationError
from supermall.domain.product import Product


def make_product(pid='p1'):
    return Product(id=pid, name='Wireless Headphones', price=Decimal('2999.00'), discount=10, stock=5)


class TestWishlistEndpoint:
    def test_requires_login(self, client):
        assert client.get('/api/v1/wishlist/').status_code == 401

    @patch('supermall.api.wishlist.WishlistService')
    def test_list(self, mock_service, user_client):
        mock_service.return_value.list_wishlist.return_value = [make_product('p1'), make_product('p2')]

        body = user_client.get('/api/v1/wishlist/').json()

        assert body['count'] == 2
        assert [p['id'] for p in body['data']] == ['p1', 'p2']
        mock_service.return_value.list_wishlist.assert_called_once_with('user-1')

    @patch('supermall.api.wishlist.WishlistService')
    def test_add_unknown_product(self, mock_service, user_client):
        mock_service.return_value.add.side_effect = NotFoundError('Product p9 not found')

        assert user_client.post('/api/v1/wishlist/p9').status_code == 404

    @patch('supermall.api.wishlist.WishlistService')
    def test_add_and_remove(self, mock_service, user_client):
        added = user_client.post('/api/v1/wishlist/p1')
        removed = user_client.delete('/api/v1/wishlist/p1')

        assert added.status_code == 201
        assert added.json()['data'] == {'product_id': 'p1', 'wishlisted': True}
        assert removed.json()['data'] == {'product_id': 'p1', 'wishlisted': False}
        mock_service.return_value.remove.assert_called_once_with('user-1', 'p1')

    @patch('supermall.api.wishlist.WishlistService')
    def test_toggle(self, mock_service, user_client):
        mock_service.return_value.toggle.return_value = False

        body = user_client.post('/api/v1/wishlist/p1/toggle').json()

        assert body['data'] == {'product_id': 'p1', 'wishlisted': False}

    @patch('supermall.api.wishlist.WishlistService')
    def test_move_to_cart(self, mock_service, user_client):
        mock_service.return_value.move_to_cart.return_value = 2

        body = user_client.post('/api/v1/wishlist/p1/move-to-cart').json()

        assert body['data'] == {'product_id': 'p1', 'cart_quantity': 2}
        mock_service.return_value.move_to_cart.assert_called_once_with('user-1', 'p1')

    @patch('supermall.api.wishlist.WishlistService')
    def test_move_out_of_stock(self, mock_service, user_client):
        mock_service.return_value.move_to_cart.side_effect = ValidationError('Wireless Headphones is out of stock')

        assert user_client.post('/api/v1/wishlist/p1/move-to-cart').status_code == 400


class TestSharedWishlist:
    @patch('supermall.api.wishlist.WishlistService')
    def test_share(self, mock_service, user_client):
        link = {'token': 'abc', 'url': 'https://mall.example.com/wishlist/shared/abc'}
        mock_service.return_value.create_share_link.return_value = link

        assert user_client.post('/api/v1/wishlist/share').json()['data'] == link

    @patch('supermall.api.wishlist.WishlistService')
    def test_public_read_needs_no_login(self, mock_service, client):
        mock_service.return_value.get_shared.return_value = [make_product()]

        response = client.get('/api/v1/wishlist/shared/abc')

        assert response.status_code == 200
        assert response.json()['count'] == 1
        mock_service.return_value.get_shared.assert_called_once_with('abc')

    @patch('supermall.api.wishlist.WishlistService')
    def test_unknown_token(self, mock_service, client):
        mock_service.return_value.get_shared.side_effect = NotFoundError('Shared wishlist not found')

        assert client.get('/api/v1/wishlist/shared/nope').status_code == 404
