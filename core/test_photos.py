import os
import shutil
import tempfile

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import override_settings
from django.urls import reverse
from rest_framework.test import APITestCase

from .models import RoomPhoto
from .services.photos import RoomPhotoService
from .testing import make_image, make_user

MEDIA_ROOT = tempfile.mkdtemp()


@override_settings(MEDIA_ROOT=MEDIA_ROOT)
class RoomPhotoTest(APITestCase):
    @classmethod
    def tearDownClass(cls):
        super().tearDownClass()
        shutil.rmtree(MEDIA_ROOT, ignore_errors=True)

    def setUp(self):
        self.user = make_user('ana@example.com', user_type='provider')
        self.client.force_authenticate(self.user)
        self.service = RoomPhotoService(self.user)

    def _upload(self, count, **extra):
        images = [make_image(f'room{index}.png') for index in range(count)]
        return self.client.post(reverse('room_photos'), {'images': images, **extra}, format='multipart')

    def test_upload_sets_primary_and_order(self):
        response = self._upload(3, primary_index=1, captions=['Bed', 'Window', 'Desk'])
        self.assertEqual(response.status_code, 201, response.data)
        photos = list(self.service.photos())
        self.assertEqual([photo.display_order for photo in photos], [1, 2, 3])
        self.assertEqual([photo.caption for photo in photos], ['Bed', 'Window', 'Desk'])
        self.assertEqual(self.service.primary_photo(), photos[1])

        self._upload(2, primary_index=0)
        photos = list(self.service.photos())
        self.assertEqual([photo.display_order for photo in photos], [1, 2, 3, 4, 5])
        self.assertEqual(RoomPhoto.objects.filter(user=self.user, is_primary=True).count(), 1)

    def test_limit_of_fifteen_photos(self):
        for index in range(14):
            RoomPhoto.objects.create(user=self.user, image=make_image(f'old{index}.png'), display_order=index + 1)
        response = self._upload(2)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['error'], 'You can only have 15 room photos. 1 more allowed.')
        self.assertEqual(self.service.count(), 14)

    def test_rejects_non_images(self):
        fake = SimpleUploadedFile('notes.png', b'not really an image', content_type='image/png')
        response = self.client.post(reverse('room_photos'), {'images': [fake]}, format='multipart')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.service.count(), 0)

    def test_rejects_unsupported_format(self):
        gif = make_image('anim.gif', image_format='GIF')
        response = self.client.post(reverse('room_photos'), {'images': [gif]}, format='multipart')
        self.assertEqual(response.status_code, 400)

    @override_settings(MAX_IMAGE_UPLOAD_BYTES=10)
    def test_rejects_large_files(self):
        response = self._upload(1)
        self.assertEqual(response.status_code, 400)
        self.assertIn('larger than', response.data['error'])

    def test_delete_primary_promotes_next_and_removes_file(self):
        self._upload(2)
        first, second = self.service.photos()
        path = first.image.path
        self.assertTrue(os.path.exists(path))

        response = self.client.delete(reverse('room_photo_detail', args=[first.pk]))
        self.assertEqual(response.status_code, 200)
        self.assertFalse(os.path.exists(path))
        second.refresh_from_db()
        self.assertTrue(second.is_primary)

    def test_reorder_and_set_primary(self):
        self._upload(3)
        ids = [photo.pk for photo in self.service.photos()]
        response = self.client.post(
            reverse('room_photos_reorder'),
            {'photo_ids': list(reversed(ids))},
            format='json',
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual([photo.pk for photo in self.service.photos()], list(reversed(ids)))

        self.client.post(reverse('room_photo_primary', args=[ids[2]]))
        self.assertEqual(self.service.primary_photo().pk, ids[2])

    def test_update_caption(self):
        self._upload(1)
        photo = self.service.photos().get()
        response = self.client.patch(reverse('room_photo_detail', args=[photo.pk]), {'caption': 'Sunny'}, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['photo']['caption'], 'Sunny')

    def test_other_users_cannot_touch_photos(self):
        self._upload(1)
        photo = self.service.photos().get()
        intruder = make_user('sam@example.com')
        self.client.force_authenticate(intruder)

        response = self.client.delete(reverse('room_photo_detail', args=[photo.pk]))
        self.assertEqual(response.status_code, 403)
        self.assertFalse(response.data['success'])

        response = self.client.post(reverse('room_photos_reorder'), {'photo_ids': [photo.pk]}, format='json')
        self.assertEqual(response.status_code, 403)
        self.assertTrue(RoomPhoto.objects.filter(pk=photo.pk).exists())
