import os
import shutil
import tempfile
from decimal import Decimal

from django.test import TestCase, override_settings
from django.urls import reverse
from rest_framework.test import APITestCase

from .models import Listing, ListingImage
from .services.marketplace import ListingCatalogService, ListingService
from .testing import make_image, make_user

def _listing(owner, **fields):
    fields.setdefault('title', 'Desk lamp')
    fields.setdefault('price', Decimal('15.00'))
    return Listing.objects.create(created_by=owner, **fields)


class ListingApiTest(APITestCase):
    def setUp(self):
        self.media_root = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.media_root, ignore_errors=True)
        media = override_settings(MEDIA_ROOT=self.media_root)
        media.enable()
        self.addCleanup(media.disable)
        self.seller = make_user('seller@example.com')
        self.client.force_authenticate(self.seller)

    def test_missing_title_or_price_rejected_before_any_write(self):
        for payload in ({'title': 'Sofa'}, {'price': '120'}):
            response = self.client.post(
                reverse('listings'),
                {**payload, 'images': [make_image()]},
                format='multipart',
            )
            self.assertEqual(response.status_code, 400)
            self.assertFalse(response.data['success'])
        self.assertEqual(Listing.objects.count(), 0)
        self.assertEqual(ListingImage.objects.count(), 0)
        self.assertFalse(os.path.exists(os.path.join(self.media_root, 'listing_images')))

    def test_create_with_images(self):
        response = self.client.post(
            reverse('listings'),
            {'title': 'Sofa', 'price': '120.50', 'location': 'Austin', 'images': [make_image('a.png'), make_image('b.png')]},
            format='multipart',
        )
        self.assertEqual(response.status_code, 201, response.data)
        listing = Listing.objects.get()
        self.assertEqual(listing.status, 'active')
        self.assertEqual(listing.created_by, self.seller)
        self.assertEqual(len(response.data['listing']['images']), 2)
        self.assertEqual(response.data['listing']['seller']['id'], self.seller.pk)

    def test_update_appends_images_and_keeps_fields(self):
        listing = _listing(self.seller, description='Brass')
        ListingImage.objects.create(listing=listing, image=make_image('old.png'), position=1)
        response = self.client.patch(
            reverse('listing_detail', args=[listing.pk]),
            {'price': '12.00', 'images': [make_image('new.png')]},
            format='multipart',
        )
        self.assertEqual(response.status_code, 200, response.data)
        listing.refresh_from_db()
        self.assertEqual(listing.price, Decimal('12.00'))
        self.assertEqual(listing.description, 'Brass')
        self.assertEqual(list(listing.images.values_list('position', flat=True)), [1, 2])

    def test_only_owner_can_change_listing(self):
        listing = _listing(self.seller)
        self.client.force_authenticate(make_user('other@example.com'))

        response = self.client.patch(reverse('listing_detail', args=[listing.pk]), {'price': '1'}, format='json')
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.data['error'], 'You can only update your own listings')
        self.assertEqual(self.client.post(reverse('listing_sold', args=[listing.pk])).status_code, 403)
        self.assertEqual(self.client.delete(reverse('listing_detail', args=[listing.pk])).status_code, 403)
        listing.refresh_from_db()
        self.assertEqual(listing.status, 'active')

    def test_mark_sold_and_delete(self):
        listing = _listing(self.seller)
        image = ListingImage.objects.create(listing=listing, image=make_image(), position=1)
        path = image.image.path

        response = self.client.post(reverse('listing_sold', args=[listing.pk]))
        self.assertEqual(response.data['listing']['status'], 'sold')

        response = self.client.delete(reverse('listing_detail', args=[listing.pk]))
        self.assertEqual(response.status_code, 200)
        self.assertFalse(Listing.objects.exists())
        self.assertFalse(os.path.exists(path))

    def test_get_missing_listing(self):
        response = self.client.get(reverse('listing_detail', args=[999]))
        self.assertEqual(response.status_code, 404)

    def test_my_listings(self):
        mine = _listing(self.seller)
        _listing(make_user('other@example.com'))
        response = self.client.get(reverse('listings_mine'))
        self.assertEqual([listing['id'] for listing in response.data['listings']], [mine.pk])


class ListingCatalogTest(TestCase):
    def setUp(self):
        self.seller = make_user('seller@example.com')
        self.lamp = _listing(self.seller, title='Desk lamp', price=Decimal('15'), location='Austin')
        self.sofa = _listing(self.seller, title='Sofa', description='Comfy couch', price=Decimal('200'), location='Dallas')
        self.bike = _listing(self.seller, title='Bike', price=Decimal('80'), location='Austin', status='sold')
        self.old = _listing(self.seller, title='Old chair', price=Decimal('5'), status='expired')
        self.catalog = ListingCatalogService()

    def _ids(self, params):
        catalog = self.catalog
        return [listing.pk for listing in catalog.get_catalog(catalog.build_filters(params), catalog.build_sort(params))]

    def test_default_shows_active_and_sold_newest_first(self):
        self.assertEqual(self._ids({}), [self.bike.pk, self.sofa.pk, self.lamp.pk])

    def test_filters(self):
        self.assertEqual(self._ids({'search': 'COUCH'}), [self.sofa.pk])
        self.assertEqual(self._ids({'min_price': '10', 'max_price': '100'}), [self.bike.pk, self.lamp.pk])
        self.assertEqual(self._ids({'location': 'aust'}), [self.bike.pk, self.lamp.pk])
        self.assertEqual(self._ids({'status': 'expired'}), [self.old.pk])

    def test_sorting(self):
        self.assertEqual(self._ids({'sort_by': 'price', 'sort_order': 'asc'}), [self.lamp.pk, self.bike.pk, self.sofa.pk])
        self.assertEqual(self._ids({'sort_by': 'title', 'sort_order': 'desc'}), [self.sofa.pk, self.lamp.pk, self.bike.pk])
        self.assertEqual(self._ids({'sort_by': 'password'}), self._ids({}))

    def test_search_only_returns_active(self):
        self.assertEqual(list(self.catalog.search('e')), [self.lamp])
        self.assertEqual(list(self.catalog.search('chair')), [])

    def test_mark_sold_twice_rejected(self):
        service = ListingService(self.seller)
        with self.assertRaises(ValueError):
            service.mark_sold(self.bike)
