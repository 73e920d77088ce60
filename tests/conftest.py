"""
Pytest fixtures and configuration for SuperMall backend tests

This file provides shared fixtures that can be used across all test modules.
"""
from datetime import datetime, date
from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest

from supermall.core.rate_limit import rate_limiter


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """Every test starts with an empty rate limit window"""
    rate_limiter.reset()
    yield
    rate_limiter.reset()


@pytest.fixture
def mock_db():
    """
    Patches the dict-cursor connection factory used by every repository

    Yields (connection, cursor) mocks; set cursor.fetchone / fetchall /
    rowcount to shape the database answer.
    """
    with patch('supermall.core.database.get_db_connection_dict') as mock_get_conn:
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        yield mock_conn, mock_cursor


@pytest.fixture
def sample_product_row():
    """
    Provides a products row as returned by ProductRepository.SELECT
    """
    return {
        'id': 'prod-1',
        'shop_id': 'shop-1',
        'category_id': 'cat-electronics',
        'category_name': 'Electronics',
        'name': 'Wireless Headphones',
        'description': 'Over-ear bluetooth headphones',
        'brand': 'Sonic',
        'sku': 'SON-WH-100',
        'price': Decimal('2999.00'),
        'discount': 10.0,
        'price_per_unit': None,
        'stock': 15,
        'image_url': 'https://cdn.example.com/headphones.jpg',
        'images': [],
        'variants': [{'id': 'v1', 'name': 'Black', 'price': '2999.00'}],
        'related_product_ids': [],
        'created_at': datetime(2025, 1, 10, 12, 0),
        'avg_rating': 4.3,
        'reviews_count': 12,
    }


@pytest.fixture
def sample_shop_row():
    return {
        'id': 'shop-1',
        'name': 'Sonic Store',
        'description': 'Audio gear',
        'category_id': 'cat-electronics',
        'category_name': 'Electronics',
        'location_name': 'Ground Floor',
        'lat': 12.9716,
        'lng': 77.5946,
        'is_open': True,
        'rating': 4.5,
        'image_url': None,
        'created_at': datetime(2024, 6, 1),
        'offer_count': 2,
    }


@pytest.fixture
def sample_offer_row():
    return {
        'id': 'offer-1',
        'title': 'Summer Sale',
        'description': 'Flat discount on audio',
        'discount': 20.0,
        'start_date': date(2025, 6, 1),
        'end_date': date(2025, 6, 30),
        'category_id': 'cat-electronics',
        'shop_id': 'shop-1',
        'floor_id': 'floor-0',
        'is_active': True,
        'image_url': None,
        'created_at': datetime(2025, 5, 20),
    }


@pytest.fixture
def sample_order_row():
    return {
        'id': 'order-1',
        'user_id': 'user-1',
        'customer_name': 'asha',
        'status': 'Pending',
        'total': Decimal('5398.20'),
        'created_at': datetime(2025, 2, 1, 9, 30),
        'updated_at': None,
    }


@pytest.fixture
def sample_order_item_row():
    return {
        'id': 'item-1',
        'order_id': 'order-1',
        'product_id': 'prod-1',
        'product_name': 'Wireless Headphones',
        'quantity': 2,
        'unit_price': Decimal('2699.10'),
        'total': Decimal('5398.20'),
    }


# ============================================================================
# API fixtures
# ============================================================================

@pytest.fixture
def shopper():
    from supermall.core.auth import TokenUser
    return TokenUser(id='user-1', email='asha@example.com', name='asha', role='user')


@pytest.fixture
def admin_user():
    from supermall.core.auth import TokenUser
    return TokenUser(id='admin-1', email='admin@supermall.test', name='admin', role='admin')


@pytest.fixture
def app():
    """FastAPI app with dependency overrides cleared after each test"""
    from supermall.main import app as fastapi_app
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """Anonymous client"""
    from fastapi.testclient import TestClient
    return TestClient(app)


@pytest.fixture
def user_client(app, shopper):
    """Client whose requests are authenticated as a regular shopper"""
    from fastapi.testclient import TestClient
    from supermall.core.auth import get_current_user, get_current_user_optional

    app.dependency_overrides[get_current_user] = lambda: shopper
    app.dependency_overrides[get_current_user_optional] = lambda: shopper
    return TestClient(app)


@pytest.fixture
def admin_client(app, admin_user):
    """Client whose requests are authenticated as an admin"""
    from fastapi.testclient import TestClient
    from supermall.core.auth import get_current_user, require_admin

    app.dependency_overrides[get_current_user] = lambda: admin_user
    app.dependency_overrides[require_admin] = lambda: admin_user
    return TestClient(app)
