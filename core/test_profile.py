import shutil
import tempfile

from django.test import TestCase, override_settings
from django.urls import reverse
from rest_framework.test import APITestCase

from .models import RoomPhoto
from .services.matching import MatchService
from .services.profile import ProfileService
from .signals import profile_setup_completed
from .testing import make_image, make_user

BASIC_INFO = {
    'name': 'Ana',
    'age': 24,
    'bio': 'Quiet grad student',
    'location': 'Austin',
    'hobbies': ['climbing', 'chess'],
    'smoking': 'no',
    'budget_min': 500,
    'budget_max': 900,
}

ROOM_DETAILS = {
    'room_type': 'private',
    'rent_amount': 850,
    'address': '12 Elm St',
    'available_from': '2026-01-01',
    'amenities': ['wifi', 'parking'],
}


class ProfileSetupTest(APITestCase):
    def setUp(self):
        self.user = make_user('ana@example.com', user_type='provider')
        self.client.force_authenticate(self.user)
        self.completions = []
        profile_setup_completed.connect(self._record_completion)
        self.addCleanup(profile_setup_completed.disconnect, self._record_completion)

    def _record_completion(self, sender, user, **kwargs):
        self.completions.append(user.pk)

    def test_setup_succeeds_and_completes_once(self):
        response = self.client.post(
            reverse('profile_setup'),
            {'profile': BASIC_INFO, 'room': ROOM_DETAILS},
            format='json',
        )
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data['success'])
        self.assertEqual(self.completions, [self.user.pk])

        self.user.refresh_from_db()
        self.assertEqual(self.user.budget, 900)
        self.assertEqual(self.user.hobbies, ['climbing', 'chess'])
        self.assertEqual(self.user.lifestyle['rent_amount'], 850)
        self.assertEqual(self.user.lifestyle['available_from'], '2026-01-01')
        self.assertEqual(self.user.lifestyle['smoking'], 'no')
        self.assertEqual(self.user.preferences['budget_min'], 500)

    def test_invalid_room_details_write_nothing(self):
        response = self.client.post(
            reverse('profile_setup'),
            {'profile': BASIC_INFO, 'room': {**ROOM_DETAILS, 'rent_amount': 0, 'address': ''}},
            format='json',
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['validation_errors']['room.rent_amount'], ['Rent amount must be greater than 0'])
        self.assertEqual(response.data['validation_errors']['room.address'], ['Address is required'])
        self.assertEqual(self.completions, [])
        self.user.refresh_from_db()
        self.assertEqual(self.user.bio, '')

    def test_seeker_preferences_need_budget(self):
        self.user.user_type = 'seeker'
        self.user.save()
        result = ProfileService(self.user).setup_profile(BASIC_INFO, preferences_data={'max_budget': 0})
        self.assertFalse(result.success)
        self.assertEqual(result.errors['preferences.max_budget'], ['Budget must be greater than 0'])

    def test_room_details_checked_for_any_role(self):
        self.user.user_type = 'seeker'
        self.user.save()
        result = ProfileService(self.user).setup_profile(BASIC_INFO, room_data={**ROOM_DETAILS, 'address': ''})
        self.assertFalse(result.success)
        self.assertEqual(result.errors['room.address'], ['Address is required'])
        self.assertEqual(self.completions, [])


class ProfileUpdateTest(APITestCase):
    def setUp(self):
        self.user = make_user('ana@example.com', bio='Old bio', location='Austin')
        self.client.force_authenticate(self.user)

    def test_partial_update_maps_camel_case(self):
        before = self.user.updated_at
        response = self.client.patch(
            reverse('profile'),
            {'housingStatus': 'looking', 'universityAffiliation': 'UT Austin', 'hobbies': 'yoga, film'},
            format='json',
        )
        self.assertEqual(response.status_code, 200, response.data)
        self.assertEqual(response.data['user']['housingStatus'], 'looking')
        self.assertEqual(response.data['user']['universityAffiliation'], 'UT Austin')
        self.user.refresh_from_db()
        self.assertEqual(self.user.bio, 'Old bio')
        self.assertEqual(self.user.hobbies, ['yoga', 'film'])
        self.assertGreater(self.user.updated_at, before)

    def test_age_out_of_range(self):
        response = self.client.patch(reverse('profile'), {'age': 15}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['error'], 'Age must be between 18 and 100')

    def test_set_role(self):
        response = self.client.post(reverse('profile_role'), {'role': 'seeker'}, format='json')
        self.assertEqual(response.status_code, 200)
        self.user.refresh_from_db()
        self.assertEqual(self.user.user_type, 'seeker')


class ProfileVisibilityTest(APITestCase):
    def setUp(self):
        self.user = make_user('ana@example.com', user_type='provider')
        self.client.force_authenticate(self.user)

    def test_toggle_persists_and_refetch_reflects_it(self):
        response = self.client.post(reverse('profile_visibility'), {'profile_visible': False}, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.data['profileVisible'])

        refetched = self.client.get(reverse('profile'))
        self.assertFalse(refetched.data['user']['profileVisible'])
        self.user.refresh_from_db()
        self.assertFalse(self.user.profile_visible)

    def test_hidden_profile_left_out_of_discovery(self):
        seeker = make_user('sam@example.com', user_type='seeker')
        self.client.post(reverse('profile_visibility'), {'profile_visible': False}, format='json')
        self.assertEqual(MatchService(seeker).discover().profiles, [])

    def test_missing_flag_rejected(self):
        response = self.client.post(reverse('profile_visibility'), {}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['error'], 'profile_visible must be provided as a boolean')
        self.user.refresh_from_db()
        self.assertTrue(self.user.profile_visible)

    def test_camel_case_flag_accepted(self):
        success, form, user = ProfileService(self.user).set_visibility({'profileVisible': 'false'})
        self.assertTrue(success, form.errors)
        self.user.refresh_from_db()
        self.assertFalse(self.user.profile_visible)

    def test_hidden_profile_not_public(self):
        other = make_user('sam@example.com', profile_visible=False)
        response = self.client.get(reverse('public_profile', args=[other.pk]))
        self.assertEqual(response.status_code, 404)


class CompletionStatusTest(TestCase):
    def setUp(self):
        self.media_root = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.media_root, ignore_errors=True)

    def test_empty_provider(self):
        user = make_user('ana@example.com', name='', user_type='provider')
        status = ProfileService(user).completion_status()
        self.assertFalse(status.has_basic_info)
        self.assertFalse(status.has_room_details)
        self.assertIsNone(status.has_preferences)
        self.assertEqual(status.completion_percentage, 0)
        self.assertEqual(
            status.missing_fields,
            ['name', 'age', 'bio', 'location', 'room_type', 'rent_amount', 'address', 'photos'],
        )

    def test_percentage_rounds_half_up(self):
        user = make_user(
            'ana@example.com',
            user_type='provider',
            age=28,
            bio='Hi',
            location='Austin',
            lifestyle={'room_type': 'private'},
        )
        status = ProfileService(user).completion_status()
        self.assertEqual(status.missing_fields, ['rent_amount', 'address', 'photos'])
        self.assertEqual(status.completion_percentage, 63)

    def test_complete_seeker(self):
        user = make_user(
            'sam@example.com',
            user_type='seeker',
            age=30,
            bio='Hi',
            location='Austin',
            preferences={'budget_max': 900, 'preferred_location': 'Austin'},
        )
        with override_settings(MEDIA_ROOT=self.media_root):
            RoomPhoto.objects.create(user=user, image=make_image())
            status = ProfileService(user).completion_status()
            suggestions = ProfileService(user).suggestions()
        self.assertTrue(status.is_complete)
        self.assertEqual(status.completion_percentage, 100)
        self.assertEqual(suggestions['priority_actions'], [])
        self.assertIn('Your profile looks great! Start swiping to find matches', suggestions['suggestions'])

    def test_suggestions_for_incomplete_seeker(self):
        user = make_user('sam@example.com', user_type='seeker', age=30, location='Austin')
        suggestions = ProfileService(user).suggestions()
        self.assertEqual(
            suggestions['priority_actions'],
            [
                'Complete your basic profile information',
                'Set your housing preferences',
                'Upload photos of your space',
            ],
        )
        self.assertIn('Add a bio to tell others about yourself', suggestions['suggestions'])
