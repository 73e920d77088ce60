"""
Tests for product comparison endpoints
"""
from unittest.mock import patch

from supermall.core.errors import NotFoundError, ValidationError


class TestCompareEndpoint:
    def test_requires_login(self, client):
        assert client.get('/api/v1/compare/').status_code == 401

    @patch('supermall.api.compare.ComparisonService')
    def test_view(self, mock_service, user_client):
        table = {'header': ['Attribute', 'Headphones', 'Speaker'], 'rows': [], 'differences': []}
        mock_service.return_value.view.return_value = table

        body = user_client.get('/api/v1/compare/').json()

        assert body['data'] == table
        mock_service.return_value.view.assert_called_once_with('user-1')

    @patch('supermall.api.compare.ComparisonService')
    def test_add(self, mock_service, user_client):
        mock_service.return_value.add.return_value = 2

        response = user_client.post('/api/v1/compare/p2')

        assert response.status_code == 201
        assert response.json()['data'] == {'product_id': 'p2', 'count': 2}

    @patch('supermall.api.compare.ComparisonService')
    def test_sixth_product_is_bad_request(self, mock_service, user_client):
        mock_service.return_value.add.side_effect = ValidationError('You can compare at most 5 products')

        response = user_client.post('/api/v1/compare/p6')

        assert response.status_code == 400
        assert response.json()['detail'] == 'You can compare at most 5 products'

    @patch('supermall.api.compare.ComparisonService')
    def test_remove_unknown(self, mock_service, user_client):
        mock_service.return_value.remove.side_effect = NotFoundError('Product is not in the comparison')

        assert user_client.delete('/api/v1/compare/p9').status_code == 404

    @patch('supermall.api.compare.ComparisonService')
    def test_clear(self, mock_service, user_client):
        mock_service.return_value.clear.return_value = 3

        assert user_client.delete('/api/v1/compare/').json()['data'] == {'removed': 3}
