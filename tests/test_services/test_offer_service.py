"""
Unit tests for OfferService
"""
from datetime import date
from unittest.mock import MagicMock, patch

import pytest

from supermall.core.errors import ConflictError, NotFoundError, ValidationError
from supermall.domain.offer import Offer
from supermall.services.offer_service import OfferService, validate_offer_data
from supermall.utils.filters import OfferFilters


def make_offer(**overrides):
    data = {
        'id': 'offer-1',
        'title': 'Summer Sale',
        'discount': 20,
        'start_date': date(2025, 6, 1),
        'end_date': date(2025, 6, 30),
        'is_active': True,
    }
    data.update(overrides)
    return Offer(**data)


@pytest.fixture
def offer_repo():
    return MagicMock()


@pytest.fixture
def storage():
    return MagicMock()


@pytest.fixture
def service(offer_repo, storage):
    return OfferService(repo=offer_repo, storage=storage)


class TestValidateOfferData:
    def test_valid(self):
        validate_offer_data({'title': 'Sale', 'discount': 15})

    @pytest.mark.parametrize('data', [
        {'title': '  ', 'discount': 10},
        {'title': 'Sale', 'discount': 0},
        {'title': 'Sale', 'discount': 120},
        {'title': 'Sale'},
        {'title': 'Sale', 'discount': 10, 'start_date': date(2025, 6, 2), 'end_date': date(2025, 6, 1)},
    ])
    def test_invalid(self, data):
        with pytest.raises(ValidationError):
            validate_offer_data(data)


class TestListOffers:
    def test_pipeline(self, service, offer_repo):
        offer_repo.find_all.return_value = [
            make_offer(id='o1', discount=10, end_date=date(2025, 6, 30)),
            make_offer(id='o2', discount=40, end_date=date(2025, 5, 1)),
            make_offer(id='o3', discount=30, end_date=date(2025, 6, 10)),
        ]

        page = service.list_offers(OfferFilters(), sort='discountDesc', today=date(2025, 6, 5))

        assert [o.id for o in page.items] == ['o3', 'o1']
        assert page.end_reached is True

    def test_invalid_sort(self, service):
        with pytest.raises(ValidationError):
            service.list_offers(sort='cheapest')


class TestRedeemOffer:
    def test_redeems_once(self, service, offer_repo):
        offer_repo.find_by_id.return_value = make_offer()
        offer_repo.record_redemption.return_value = True

        offer = service.redeem_offer('user-1', 'offer-1', today=date(2025, 6, 15))

        assert offer.id == 'offer-1'
        offer_repo.record_redemption.assert_called_once_with('user-1', 'offer-1')

    def test_second_redemption_conflicts(self, service, offer_repo):
        offer_repo.find_by_id.return_value = make_offer()
        offer_repo.record_redemption.return_value = False

        with pytest.raises(ConflictError, match='already redeemed'):
            service.redeem_offer('user-1', 'offer-1', today=date(2025, 6, 15))

    @pytest.mark.parametrize('overrides,today,message', [
        ({'is_active': False}, date(2025, 6, 15), 'not active'),
        ({}, date(2025, 5, 31), 'not started'),
        ({}, date(2025, 7, 1), 'expired'),
    ])
    def test_unredeemable(self, service, offer_repo, overrides, today, message):
        offer_repo.find_by_id.return_value = make_offer(**overrides)

        with pytest.raises(ValidationError, match=message):
            service.redeem_offer('user-1', 'offer-1', today=today)
        offer_repo.record_redemption.assert_not_called()

    def test_unknown_offer(self, service, offer_repo):
        offer_repo.find_by_id.return_value = None

        with pytest.raises(NotFoundError):
            service.redeem_offer('user-1', 'missing')


class TestAdmin:
    def test_update_missing_offer(self, service, offer_repo):
        offer_repo.find_by_id.return_value = None

        with pytest.raises(NotFoundError):
            service.update_offer('missing', {'title': 'New'})
        offer_repo.update.assert_not_called()

    def test_update_checks_dates_against_stored_offer(self, service, offer_repo):
        offer_repo.find_by_id.return_value = make_offer(start_date=date(2025, 6, 10))

        with pytest.raises(ValidationError, match='End date'):
            service.update_offer('offer-1', {'end_date': date(2025, 6, 1)})
        offer_repo.update.assert_not_called()

    @pytest.mark.parametrize('field', ['is_active', 'discount', 'title'])
    def test_update_rejects_null_required_field(self, service, offer_repo, field):
        offer_repo.find_by_id.return_value = make_offer()

        with pytest.raises(ValidationError, match=field):
            service.update_offer('offer-1', {field: None})
        offer_repo.update.assert_not_called()

    def test_update_keeps_stored_fields(self, service, offer_repo):
        offer_repo.find_by_id.return_value = make_offer()
        offer_repo.update.return_value = True

        service.update_offer('offer-1', {'description': 'New copy'})

        offer_repo.update.assert_called_once_with('offer-1', {'description': 'New copy'})

    def test_delete_removes_banner(self, service, offer_repo, storage):
        offer_repo.find_by_id.return_value = make_offer(image_url='https://x.co/storage/v1/object/public/b/offers/o.jpg')
        offer_repo.delete.return_value = True
        storage.path_from_url.return_value = 'offers/o.jpg'

        service.delete_offer('offer-1')

        storage.delete_file.assert_called_once_with('offers/o.jpg')

    @patch('supermall.services.offer_service.settings')
    def test_share_link(self, mock_settings, service, offer_repo):
        mock_settings.PUBLIC_APP_URL = 'https://mall.example.com/'
        offer_repo.find_by_id.return_value = make_offer()

        link = service.share_link('offer-1')

        assert link['url'] == 'https://mall.example.com/offers/offer-1'
        assert link['text'] == 'Summer Sale: 20% off at SuperMall'
