"""
Unit tests for ShopRepository
"""
from supermall.domain.shop import Shop
from supermall.repositories.shop_repository import ShopRepository


class TestShopRepository:
    """Test ShopRepository methods"""

    def test_find_all_returns_shops(self, mock_db, sample_shop_row):
        _, mock_cursor = mock_db
        mock_cursor.fetchall.return_value = [sample_shop_row]

        shops = ShopRepository().find_all()

        assert len(shops) == 1
        assert isinstance(shops[0], Shop)
        assert shops[0].offer_count == 2
        assert shops[0].coords == {'lat': 12.9716, 'lng': 77.5946}

    def test_create_filters_unknown_columns(self, mock_db):
        """Only whitelisted columns reach the INSERT"""
        # Arrange
        mock_conn, mock_cursor = mock_db
        mock_cursor.fetchone.return_value = {'id': 'shop-9'}

        # Act
        shop_id = ShopRepository().create({'name': 'Tea House', 'is_open': True, 'owner': 'hacker'})

        # Assert
        assert shop_id == 'shop-9'
        sql, params = mock_cursor.execute.call_args[0]
        assert 'owner' not in sql
        assert params == ['Tea House', True]
        mock_conn.commit.assert_called_once()

    def test_update_returns_false_when_missing(self, mock_db):
        _, mock_cursor = mock_db
        mock_cursor.rowcount = 0

        assert ShopRepository().update('missing', {'name': 'New'}) is False
        sql, params = mock_cursor.execute.call_args[0]
        assert 'name = %s' in sql
        assert params == ['New', 'missing']

    def test_update_without_known_fields_checks_existence(self, mock_db, sample_shop_row):
        _, mock_cursor = mock_db
        mock_cursor.fetchone.return_value = sample_shop_row

        assert ShopRepository().update('shop-1', {'unknown': 1}) is True
        assert 'UPDATE' not in mock_cursor.execute.call_args[0][0]

    def test_has_stock(self, mock_db):
        _, mock_cursor = mock_db
        mock_cursor.fetchone.return_value = {'in_stock': False}

        assert ShopRepository().has_stock('shop-1') is False

    def test_favorites(self, mock_db):
        mock_conn, mock_cursor = mock_db
        mock_cursor.fetchall.return_value = [{'shop_id': 'shop-1'}, {'shop_id': 'shop-2'}]

        repo = ShopRepository()
        repo.add_favorite('user-1', 'shop-1')
        ids = repo.find_favorite_ids('user-1')

        assert ids == ['shop-1', 'shop-2']
        assert 'ON CONFLICT' in mock_cursor.execute.call_args_list[0][0][0]
