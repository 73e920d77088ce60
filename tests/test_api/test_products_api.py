"""
Tests for the product listing and detail endpoints
"""
from decimal import Decimal
from unittest.mock import patch

from supermall.core.errors import NotFoundError, ValidationError
from supermall.domain.product import Product
from supermall.utils.filters import Page


def make_product(pid='p1', **overrides):
    data = {'id': pid, 'name': 'Wireless Headphones', 'price': Decimal('2999.00'), 'discount': 10, 'stock': 5}
    data.update(overrides)
    return Product(**data)


class TestProductsEndpoint:
    """Test GET /api/v1/products/"""

    @patch('supermall.api.products.ProductService')
    def test_listing_envelope(self, mock_service, client):
        # Arrange
        page = Page(items=[make_product()], page=1, page_size=24, total=1, end_reached=True)
        mock_service.return_value.list_products.return_value = (page, set())

        # Act
        response = client.get('/api/v1/products/', params={'search': 'headphones', 'in_stock': 'true'})

        # Assert
        assert response.status_code == 200
        body = response.json()
        assert body['status'] == 'success'
        assert body['total'] == 1
        assert body['end_reached'] is True
        assert body['data'][0]['sale_price'] == 2699.1
        assert body['data'][0]['wishlisted'] is False

        kwargs = mock_service.return_value.list_products.call_args.kwargs
        assert kwargs['search'] == 'headphones'
        assert kwargs['filters'].in_stock_only is True
        assert kwargs['user_id'] is None

    @patch('supermall.api.products.ProductService')
    def test_signed_in_listing_marks_wishlist(self, mock_service, user_client):
        page = Page(items=[make_product('p1'), make_product('p2')], page=1, page_size=24, total=2, end_reached=True)
        mock_service.return_value.list_products.return_value = (page, {'p2'})

        body = user_client.get('/api/v1/products/').json()

        assert [p['wishlisted'] for p in body['data']] == [False, True]
        assert mock_service.return_value.list_products.call_args.kwargs['user_id'] == 'user-1'

    @patch('supermall.api.products.ProductService')
    def test_invalid_sort_is_bad_request(self, mock_service, client):
        mock_service.return_value.list_products.side_effect = ValidationError("Invalid sort 'name'")

        response = client.get('/api/v1/products/', params={'sort': 'name'})

        assert response.status_code == 400
        assert "Invalid sort" in response.json()['detail']

    def test_page_must_be_positive(self, client):
        response = client.get('/api/v1/products/', params={'page': 0})
        assert response.status_code == 422

    @patch('supermall.api.products.ProductService')
    def test_product_not_found(self, mock_service, client):
        mock_service.return_value.get_product_details.side_effect = NotFoundError('Product x not found')

        response = client.get('/api/v1/products/x')

        assert response.status_code == 404

    @patch('supermall.api.products.ProductService')
    def test_product_details(self, mock_service, client):
        mock_service.return_value.get_product_details.return_value = {
            'product': make_product(),
            'reviews': [],
            'average_rating': None,
            'related': [make_product('p2')],
            'wishlisted': False,
        }

        body = client.get('/api/v1/products/p1').json()

        assert body['data']['id'] == 'p1'
        assert body['data']['related'][0]['id'] == 'p2'

    def test_stock_alert_requires_login(self, client):
        response = client.post('/api/v1/products/p1/stock-alert')
        assert response.status_code == 401

