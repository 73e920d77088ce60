"""
Unit tests for WishlistService
"""
from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest

from supermall.core.errors import NotFoundError, ValidationError
from supermall.domain.product import Product
from supermall.services.wishlist_service import WishlistService


@pytest.fixture
def repos():
    return MagicMock(), MagicMock(), MagicMock()


@pytest.fixture
def service(repos):
    wishlist_repo, product_repo, cart_repo = repos
    return WishlistService(repo=wishlist_repo, product_repo=product_repo, cart_repo=cart_repo)


def make_product(stock=3):
    return Product(id='p1', name='Headphones', price=Decimal('100'), stock=stock)


class TestWishlistService:
    def test_toggle_adds_then_removes(self, service, repos):
        wishlist_repo, product_repo, _ = repos
        product_repo.find_by_id.return_value = make_product()

        wishlist_repo.contains.return_value = False
        assert service.toggle('user-1', 'p1') is True
        wishlist_repo.add.assert_called_once_with('user-1', 'p1')

        wishlist_repo.contains.return_value = True
        wishlist_repo.remove.return_value = True
        assert service.toggle('user-1', 'p1') is False
        wishlist_repo.remove.assert_called_once_with('user-1', 'p1')

    def test_add_unknown_product(self, service, repos):
        repos[1].find_by_id.return_value = None

        with pytest.raises(NotFoundError):
            service.add('user-1', 'missing')

    def test_move_to_cart(self, service, repos):
        wishlist_repo, product_repo, cart_repo = repos
        wishlist_repo.contains.return_value = True
        product_repo.find_by_id.return_value = make_product()
        cart_repo.add.return_value = 2

        assert service.move_to_cart('user-1', 'p1') == 2
        cart_repo.add.assert_called_once_with('user-1', 'p1', 1)
        wishlist_repo.remove.assert_called_once_with('user-1', 'p1')

    def test_move_out_of_stock_product(self, service, repos):
        wishlist_repo, product_repo, cart_repo = repos
        wishlist_repo.contains.return_value = True
        product_repo.find_by_id.return_value = make_product(stock=0)

        with pytest.raises(ValidationError):
            service.move_to_cart('user-1', 'p1')
        cart_repo.add.assert_not_called()
        wishlist_repo.remove.assert_not_called()

    def test_move_not_wishlisted(self, service, repos):
        repos[0].contains.return_value = False

        with pytest.raises(NotFoundError):
            service.move_to_cart('user-1', 'p1')

    @patch('supermall.services.wishlist_service.generate_secure_token', return_value='tok123')
    def test_share_link(self, mock_token, service, repos):
        wishlist_repo = repos[0]
        wishlist_repo.find_product_ids.return_value = ['p1', 'p2']

        link = service.create_share_link('user-1')

        assert link['token'] == 'tok123'
        assert link['url'].endswith('/wishlist/shared/tok123')
        wishlist_repo.create_share.assert_called_once_with('tok123', 'user-1', ['p1', 'p2'])

    def test_share_empty_wishlist(self, service, repos):
        repos[0].find_product_ids.return_value = []

        with pytest.raises(ValidationError):
            service.create_share_link('user-1')

    def test_unknown_share_token(self, service, repos):
        repos[0].find_share.return_value = None

        with pytest.raises(NotFoundError):
            service.get_shared('nope')
