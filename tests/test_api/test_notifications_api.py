"""
Tests for push subscription and notification endpoints
"""
from unittest.mock import patch

from supermall.core.errors import NotFoundError


class TestNotificationsEndpoint:
    def test_subscribe_requires_login(self, client):
        assert client.post('/api/v1/notifications/subscribe', json={'token': 'device-1'}).status_code == 401

    @patch('supermall.api.notifications.NotificationService')
    def test_subscribe(self, mock_service, user_client):
        response = user_client.post('/api/v1/notifications/subscribe', json={'token': 'device-1'})

        assert response.status_code == 200
        mock_service.return_value.subscribe.assert_called_once_with('user-1', 'device-1')

    def test_subscribe_needs_token(self, user_client):
        assert user_client.post('/api/v1/notifications/subscribe', json={'token': ''}).status_code == 422

    @patch('supermall.api.notifications.NotificationService')
    def test_list(self, mock_service, user_client):
        mock_service.return_value.list_notifications.return_value = [
            {'id': 'n1', 'title': 'Order shipped', 'body': 'Your order is on its way'},
        ]

        body = user_client.get('/api/v1/notifications/').json()

        assert body['count'] == 1
        mock_service.return_value.list_notifications.assert_called_once_with('user-1')

    def test_send_is_admin_only(self, user_client):
        payload = {'user_id': 'user-2', 'title': 'Hi', 'body': 'Hello'}
        assert user_client.post('/api/v1/notifications/send', json=payload).status_code == 403

    @patch('supermall.api.notifications.NotificationService')
    def test_send(self, mock_service, admin_client):
        mock_service.return_value.send.return_value = {'id': 'n2', 'user_id': 'user-2', 'title': 'Sale'}

        response = admin_client.post('/api/v1/notifications/send', json={
            'user_id': 'user-2', 'title': 'Sale', 'body': '20% off today', 'data': {'offer_id': 'offer-1'},
        })

        assert response.status_code == 201
        mock_service.return_value.send.assert_called_once_with(
            'user-2', 'Sale', '20% off today', {'offer_id': 'offer-1'}
        )

    @patch('supermall.api.notifications.NotificationService')
    def test_send_to_unknown_user(self, mock_service, admin_client):
        mock_service.return_value.send.side_effect = NotFoundError('User user-9 not found')

        payload = {'user_id': 'user-9', 'title': 'Hi', 'body': 'Hello'}
        assert admin_client.post('/api/v1/notifications/send', json=payload).status_code == 404
