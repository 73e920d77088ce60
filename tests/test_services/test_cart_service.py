"""
Unit tests for CartService
"""
from datetime import datetime
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from supermall.core.errors import ConflictError, NotFoundError, ValidationError
from supermall.domain.order import Order
from supermall.domain.product import Product
from supermall.domain.user import CartItem
from supermall.services.cart_service import CartService, to_order_items


def cart_item(product_id='prod-1', quantity=2, stock=15, price='2999.00', discount=10.0, name='Wireless Headphones'):
    return CartItem(
        user_id='user-1',
        product_id=product_id,
        quantity=quantity,
        product_name=name,
        price=Decimal(price),
        discount=discount,
        stock=stock,
    )


@pytest.fixture
def repos():
    return MagicMock(), MagicMock(), MagicMock()


@pytest.fixture
def service(repos):
    cart_repo, product_repo, order_repo = repos
    return CartService(repo=cart_repo, product_repo=product_repo, order_repo=order_repo)


class TestGetCart:
    def test_totals(self, service, repos):
        cart_repo, _, _ = repos
        cart_repo.find_items.return_value = [
            cart_item(),
            cart_item(product_id='prod-2', quantity=1, price='399.00', discount=0, name='Paperback'),
        ]

        cart = service.get_cart('user-1')

        assert cart['item_count'] == 3
        # 2 x 2699.10 + 399.00
        assert cart['subtotal'] == pytest.approx(5797.20)
        assert cart['items'][0]['unit_price'] == pytest.approx(2699.10)

    def test_empty_cart(self, service, repos):
        repos[0].find_items.return_value = []

        assert service.get_cart('user-1') == {'items': [], 'item_count': 0, 'subtotal': 0.0}


class TestAddItem:
    def test_rejects_zero_quantity(self, service):
        with pytest.raises(ValidationError):
            service.add_item('user-1', 'prod-1', 0)

    def test_unknown_product(self, service, repos):
        repos[1].find_by_id.return_value = None

        with pytest.raises(NotFoundError):
            service.add_item('user-1', 'missing')

    def test_out_of_stock(self, service, repos):
        repos[1].find_by_id.return_value = Product(id='prod-1', name='Headphones', price=Decimal('10'), stock=0)

        with pytest.raises(ValidationError, match='out of stock'):
            service.add_item('user-1', 'prod-1')
        repos[0].add.assert_not_called()

    def test_merges_quantity(self, service, repos):
        cart_repo, product_repo, _ = repos
        product_repo.find_by_id.return_value = Product(id='prod-1', name='Headphones', price=Decimal('10'), stock=5)
        cart_repo.add.return_value = 3

        assert service.add_item('user-1', 'prod-1', 2) == 3
        cart_repo.add.assert_called_once_with('user-1', 'prod-1', 2)


class TestUpdateQuantity:
    def test_zero_removes_line(self, service, repos):
        cart_repo = repos[0]
        cart_repo.remove.return_value = True

        service.update_quantity('user-1', 'prod-1', 0)

        cart_repo.remove.assert_called_once_with('user-1', 'prod-1')
        cart_repo.set_quantity.assert_not_called()

    def test_negative_rejected(self, service):
        with pytest.raises(ValidationError):
            service.update_quantity('user-1', 'prod-1', -1)

    def test_missing_line(self, service, repos):
        repos[0].set_quantity.return_value = False

        with pytest.raises(NotFoundError):
            service.update_quantity('user-1', 'prod-1', 4)


class TestCheckout:
    def test_empty_cart_rejected(self, service, repos):
        repos[0].find_items.return_value = []

        with pytest.raises(ValidationError, match='empty'):
            service.checkout('user-1')
        repos[2].create.assert_not_called()

    def test_line_exceeding_stock_rejected(self, service, repos):
        repos[0].find_items.return_value = [cart_item(quantity=5, stock=3)]

        with pytest.raises(ConflictError, match='Not enough stock for: Wireless Headphones'):
            service.checkout('user-1')
        repos[2].create.assert_not_called()

    def test_places_order_and_clears_cart(self, service, repos):
        # Arrange
        cart_repo, _, order_repo = repos
        cart_repo.find_items.return_value = [cart_item()]
        order_repo.create.return_value = Order(
            id='order-1', user_id='user-1', total=Decimal('5398.20'), created_at=datetime(2025, 2, 1),
        )

        # Act
        order = service.checkout('user-1', 'asha')

        # Assert
        assert order.id == 'order-1'
        kwargs = order_repo.create.call_args.kwargs
        assert kwargs['clear_cart'] is True
        assert kwargs['customer_name'] == 'asha'
        assert kwargs['items'][0].unit_price == Decimal('2699.10')
        assert kwargs['items'][0].total == Decimal('5398.20')


def test_to_order_items_falls_back_to_product_id():
    items = to_order_items([cart_item(name=None)])
    assert items[0].product_name == 'prod-1'
