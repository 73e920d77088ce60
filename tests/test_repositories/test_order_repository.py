"""
Unit tests for OrderRepository
"""
from decimal import Decimal

import pytest

from supermall.core.errors import ConflictError
from supermall.domain.order import Order, OrderItem, OrderStatus
from supermall.repositories.order_repository import OrderRepository


def make_item(quantity=2):
    unit_price = Decimal('2699.10')
    return OrderItem(
        product_id='prod-1',
        product_name='Wireless Headphones',
        quantity=quantity,
        unit_price=unit_price,
        total=unit_price * quantity,
    )


class TestOrderRepository:
    """Test OrderRepository methods"""

    def test_find_by_id_attaches_items(self, mock_db, sample_order_row, sample_order_item_row):
        # Arrange
        _, mock_cursor = mock_db
        mock_cursor.fetchone.return_value = sample_order_row
        mock_cursor.fetchall.return_value = [sample_order_item_row]

        # Act
        order = OrderRepository().find_by_id('order-1')

        # Assert
        assert isinstance(order, Order)
        assert order.status == OrderStatus.PENDING
        assert len(order.items) == 1
        assert order.items[0].quantity == 2
        assert mock_cursor.execute.call_count == 2
        assert mock_cursor.execute.call_args[0][1] == (['order-1'],)

    def test_find_by_id_not_found(self, mock_db):
        _, mock_cursor = mock_db
        mock_cursor.fetchone.return_value = None

        assert OrderRepository().find_by_id('missing') is None
        mock_cursor.execute.assert_called_once()

    def test_find_by_user_without_orders_skips_items_query(self, mock_db):
        _, mock_cursor = mock_db
        mock_cursor.fetchall.return_value = []

        assert OrderRepository().find_by_user('user-1') == []
        mock_cursor.execute.assert_called_once()

    def test_create_decrements_stock_and_clears_cart(self, mock_db, sample_order_row, sample_order_item_row):
        """Checkout writes the order, its lines and empties the cart in one commit"""
        # Arrange
        mock_conn, mock_cursor = mock_db
        mock_cursor.rowcount = 1
        mock_cursor.fetchone.side_effect = [sample_order_row, sample_order_item_row]

        # Act
        order = OrderRepository().create('user-1', 'asha', [make_item()], clear_cart=True)

        # Assert
        assert order.id == 'order-1'
        assert order.items[0].id == 'item-1'
        statements = [c[0][0] for c in mock_cursor.execute.call_args_list]
        assert 'UPDATE products SET stock' in statements[0]
        assert 'INSERT INTO orders' in statements[1]
        assert 'INSERT INTO order_items' in statements[2]
        assert 'DELETE FROM cart_items' in statements[3]
        # order total is the sum of line totals
        assert mock_cursor.execute.call_args_list[1][0][1] == ('user-1', 'asha', Decimal('5398.20'))
        mock_conn.commit.assert_called_once()
        mock_conn.rollback.assert_not_called()

    def test_create_without_clear_cart_keeps_cart(self, mock_db, sample_order_row, sample_order_item_row):
        _, mock_cursor = mock_db
        mock_cursor.rowcount = 1
        mock_cursor.fetchone.side_effect = [sample_order_row, sample_order_item_row]

        OrderRepository().create('user-1', 'asha', [make_item()])

        statements = [c[0][0] for c in mock_cursor.execute.call_args_list]
        assert not any('cart_items' in sql for sql in statements)

    def test_create_rolls_back_when_stock_is_short(self, mock_db):
        """A guarded stock update touching no row aborts the whole order"""
        # Arrange
        mock_conn, mock_cursor = mock_db
        mock_cursor.rowcount = 0

        # Act / Assert
        with pytest.raises(ConflictError, match='Not enough stock for Wireless Headphones'):
            OrderRepository().create('user-1', 'asha', [make_item(quantity=50)], clear_cart=True)

        mock_cursor.execute.assert_called_once()
        mock_conn.rollback.assert_called_once()
        mock_conn.commit.assert_not_called()
        mock_conn.close.assert_called_once()

    def test_update_status(self, mock_db):
        mock_conn, mock_cursor = mock_db
        mock_cursor.rowcount = 1

        assert OrderRepository().update_status('order-1', 'Shipped') is True
        assert mock_cursor.execute.call_args[0][1] == ('Shipped', 'order-1')
        mock_conn.commit.assert_called_once()

    def test_cancel_if_pending_guards_on_status(self, mock_db):
        mock_conn, mock_cursor = mock_db
        mock_cursor.rowcount = 1

        assert OrderRepository().cancel_if_pending('order-1') is True
        sql, params = mock_cursor.execute.call_args[0]
        assert 'WHERE id = %s AND status = %s' in sql
        assert params == ('Cancelled', 'order-1', 'Pending')
        mock_conn.commit.assert_called_once()

    def test_cancel_if_pending_when_order_moved_on(self, mock_db):
        _, mock_cursor = mock_db
        mock_cursor.rowcount = 0

        assert OrderRepository().cancel_if_pending('order-1') is False

    def test_total_sales(self, mock_db):
        _, mock_cursor = mock_db
        mock_cursor.fetchone.return_value = {'total_sales': Decimal('10500.50')}

        assert OrderRepository().total_sales() == Decimal('10500.50')
        assert "status <> 'Cancelled'" in mock_cursor.execute.call_args[0][0]

    def test_top_products_converts_revenue(self, mock_db):
        _, mock_cursor = mock_db
        mock_cursor.fetchall.return_value = [
            {'product_id': 'prod-1', 'product_name': 'Wireless Headphones',
             'units_sold': 7, 'revenue': Decimal('18893.70')},
        ]

        top = OrderRepository().top_products(limit=3)

        assert top == [{'product_id': 'prod-1', 'product_name': 'Wireless Headphones',
                        'units_sold': 7, 'revenue': 18893.7}]
        assert mock_cursor.execute.call_args[0][1] == (3,)
