from decimal import Decimal

from django.core.exceptions import NON_FIELD_ERRORS
from django.test import TestCase

from .forms import ExpenseGroupForm, ListingForm, MessageForm, ProfileSetupForm, RegisterForm, SignInForm
from .forms.fields import StringListField
from .testing import make_user


class RegisterFormTest(TestCase):
    def test_short_password_rejected(self):
        form = RegisterForm(data={'name': 'Test', 'email': 'test@example.com', 'password': 'abc'})
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors['password'], ['Password should be at least 6 characters.'])

    def test_duplicate_email_rejected_case_insensitively(self):
        make_user('taken@example.com')
        form = RegisterForm(data={'name': 'Test', 'email': 'Taken@Example.com', 'password': 'abc123'})
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors['email'], ['An account with this email already exists.'])

    def test_save_builds_unique_username(self):
        make_user('sam@example.com')
        form = RegisterForm(data={'name': 'Sam', 'email': 'sam@other.com', 'password': 'abc123'})
        self.assertTrue(form.is_valid(), form.errors)
        user = form.save()
        self.assertEqual(user.username, 'sam1')
        self.assertTrue(user.check_password('abc123'))


class SignInFormTest(TestCase):
    def test_wrong_password(self):
        make_user('sam@example.com')
        form = SignInForm(data={'email': 'sam@example.com', 'password': 'nope123'})
        self.assertFalse(form.is_valid())
        self.assertEqual(form.non_field_errors(), ['Invalid email or password.'])

    def test_email_lookup_ignores_case(self):
        user = make_user('sam@example.com')
        form = SignInForm(data={'email': 'SAM@example.com', 'password': 'secret123'})
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.get_user(), user)


class ProfileSetupFormTest(TestCase):
    def test_required_messages(self):
        form = ProfileSetupForm(data={'age': 12})
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors['name'], ['Name is required'])
        self.assertEqual(form.errors['age'], ['Age must be between 18 and 100'])
        self.assertEqual(form.errors['bio'], ['Bio is required'])
        self.assertEqual(form.errors['location'], ['Location is required'])

    def test_budget_range_must_be_ordered(self):
        form = ProfileSetupForm(data={
            'name': 'Ana', 'age': 25, 'bio': 'Hi', 'location': 'Austin',
            'budget_min': 900, 'budget_max': 500,
        })
        self.assertFalse(form.is_valid())
        self.assertIn('budget_max', form.errors)


class StringListFieldTest(TestCase):
    def test_accepts_comma_separated_text(self):
        self.assertEqual(StringListField().clean('hiking, chess ,'), ['hiking', 'chess'])

    def test_accepts_list(self):
        self.assertEqual(StringListField().clean(['a', ' b ']), ['a', 'b'])


class ListingFormTest(TestCase):
    def test_title_and_price_required(self):
        form = ListingForm(data={'description': 'Lamp'}, owner=make_user('seller@example.com'))
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors['title'], ['Title is required.'])
        self.assertEqual(form.errors['price'], ['Price is required.'])

    def test_negative_price_rejected(self):
        form = ListingForm(data={'title': 'Lamp', 'price': '-1'}, owner=make_user('seller@example.com'))
        self.assertFalse(form.is_valid())
        self.assertIn('price', form.errors)


class MessageFormTest(TestCase):
    def test_empty_message_is_flagged(self):
        form = MessageForm(data={'content': '   '})
        self.assertFalse(form.is_valid())
        self.assertTrue(form.has_error(NON_FIELD_ERRORS, code='empty'))


class ExpenseGroupFormTest(TestCase):
    def setUp(self):
        self.creator = make_user('creator@example.com')
        self.friend = make_user('friend@example.com')

    def test_custom_amounts_must_match_total(self):
        form = ExpenseGroupForm(
            data={
                'name': 'Rent',
                'total_amount': '100.00',
                'split_type': 'custom',
                'participants': [self.creator.pk, self.friend.pk],
                'custom_amounts': '[60, 30]',
            },
            creator=self.creator,
        )
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors['custom_amounts'], ['Custom amounts must add up to the total amount.'])

    def test_participants_keep_submitted_order(self):
        form = ExpenseGroupForm(
            data={
                'name': 'Rent',
                'total_amount': '100.00',
                'split_type': 'custom',
                'participants': [self.friend.pk, self.creator.pk],
                'custom_amounts': '[70, 30]',
            },
            creator=self.creator,
        )
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.cleaned_data['participants'], [self.friend, self.creator])
        self.assertEqual(form.cleaned_data['custom_amounts'], [Decimal('70.00'), Decimal('30.00')])

    def test_unlisted_creator_cannot_be_left_a_negative_share(self):
        form = ExpenseGroupForm(
            data={
                'name': 'Rent',
                'total_amount': '100.00',
                'split_type': 'custom',
                'participants': [self.friend.pk],
                'custom_amounts': '[120]',
            },
            creator=self.creator,
        )
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors['custom_amounts'], ['Custom amounts cannot exceed the total amount.'])
