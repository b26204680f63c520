from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APITestCase

from .models import ExpenseGroup, ExpenseParticipant, Settlement
from .services.expenses import ExpenseService, split_equally
from .testing import make_user


class SplitEquallyTest(TestCase):
    def test_cents_add_up_to_total(self):
        parts = split_equally(Decimal('100.00'), 3)
        self.assertEqual(parts, [Decimal('33.34'), Decimal('33.33'), Decimal('33.33')])
        self.assertEqual(sum(parts), Decimal('100.00'))

    def test_requires_participants(self):
        with self.assertRaises(ValueError):
            split_equally(Decimal('10.00'), 0)


class ExpenseServiceTest(TestCase):
    def setUp(self):
        self.creator = make_user('creator@example.com')
        self.ana = make_user('ana@example.com')
        self.ben = make_user('ben@example.com')
        self.service = ExpenseService(self.creator)

    def _group(self, **overrides):
        data = {
            'name': 'Utilities',
            'total_amount': '90.00',
            'split_type': 'equal',
            'participants': [self.creator.pk, self.ana.pk, self.ben.pk],
        }
        data.update(overrides)
        success, form, group = self.service.create_group(data)
        self.assertTrue(success, form.errors)
        return group

    def test_equal_split(self):
        group = self._group()
        owed = dict(group.participants.values_list('user_id', 'amount_owed'))
        self.assertEqual(owed, {self.creator.pk: Decimal('30.00'), self.ana.pk: Decimal('30.00'), self.ben.pk: Decimal('30.00')})
        creator_share = group.participants.get(user=self.creator)
        self.assertTrue(creator_share.is_settled)
        self.assertEqual(creator_share.amount_paid, Decimal('30.00'))

    def test_custom_split(self):
        group = self._group(split_type='custom', custom_amounts=['10.00', '50.00', '30.00'])
        self.assertEqual(group.participants.get(user=self.ana).amount_owed, Decimal('50.00'))

    def test_creator_joins_group_when_not_listed(self):
        group = self._group(participants=[self.ana.pk])
        owed = dict(group.participants.values_list('user_id', 'amount_owed'))
        self.assertEqual(owed, {self.creator.pk: Decimal('45.00'), self.ana.pk: Decimal('45.00')})
        self.assertTrue(group.participants.get(user=self.creator).is_settled)

        dashboard = self.service.dashboard()
        self.assertEqual(len(dashboard.active_expenses), 1)
        self.assertEqual(dashboard.total_to_receive, Decimal('45.00'))

    def test_unlisted_creator_takes_custom_remainder(self):
        group = self._group(participants=[self.ana.pk, self.ben.pk], split_type='custom', custom_amounts=['20.00', '30.00'])
        owed = dict(group.participants.values_list('user_id', 'amount_owed'))
        self.assertEqual(
            owed,
            {self.creator.pk: Decimal('40.00'), self.ana.pk: Decimal('20.00'), self.ben.pk: Decimal('30.00')},
        )

    def test_invalid_group_writes_nothing(self):
        success, form, group = self.service.create_group({
            'name': 'Rent',
            'total_amount': '90.00',
            'split_type': 'custom',
            'participants': [self.ana.pk, self.ben.pk],
            'custom_amounts': ['10.00'],
        })
        self.assertFalse(success)
        self.assertIn('custom_amounts', form.errors)
        self.assertFalse(ExpenseGroup.objects.exists())

    def test_empty_participants_rejected(self):
        success, form, _ = self.service.create_group({'name': 'Rent', 'total_amount': '90.00', 'split_type': 'equal'})
        self.assertFalse(success)
        self.assertEqual(form.errors['participants'], ['Add at least one participant.'])

    def test_settlement_flow(self):
        group = self._group()
        success, form, settlement = ExpenseService(self.ana).submit_settlement(
            group, {'amount': '30.00', 'payment_method': 'upi'}
        )
        self.assertTrue(success, form.errors)
        self.assertEqual(settlement.receiver, self.creator)
        self.assertEqual(settlement.status, 'pending')

        with self.assertRaises(PermissionError):
            ExpenseService(self.ben).review_settlement(settlement, approved=True)

        self.service.review_settlement(settlement, approved=True)
        settlement.refresh_from_db()
        self.assertEqual(settlement.status, 'approved')
        self.assertIsNotNone(settlement.approved_at)
        share = group.participants.get(user=self.ana)
        self.assertEqual(share.amount_paid, Decimal('30.00'))
        self.assertTrue(share.is_settled)

        with self.assertRaises(ValueError):
            self.service.review_settlement(settlement, approved=False)

    def test_rejected_settlement_leaves_share_open(self):
        group = self._group()
        _, _, settlement = ExpenseService(self.ana).submit_settlement(group, {'amount': '30.00', 'payment_method': 'cash'})
        self.service.review_settlement(settlement, approved=False)
        self.assertEqual(Settlement.objects.get().status, 'rejected')
        self.assertFalse(group.participants.get(user=self.ana).is_settled)

    def test_only_participants_submit_settlements(self):
        group = self._group(participants=[self.creator.pk, self.ana.pk])
        with self.assertRaises(PermissionError):
            ExpenseService(self.ben).submit_settlement(group, {'amount': '10.00', 'payment_method': 'cash'})

    def test_summary_and_dashboard(self):
        group = self._group()
        ExpenseService(self.ana).submit_settlement(group, {'amount': '30.00', 'payment_method': 'cash'})

        summary = ExpenseService(self.ana).summaries()[0]
        self.assertEqual(summary.amount_owed, Decimal('30.00'))
        self.assertEqual(summary.created_by_name, self.creator.display_name)
        self.assertEqual([share.is_creator for share in summary.participants], [True, False, False])

        creator_view = self.service.dashboard()
        self.assertEqual(creator_view.total_to_receive, Decimal('60.00'))
        self.assertEqual(creator_view.total_owed, Decimal('0'))
        self.assertEqual(len(creator_view.pending_settlements), 1)
        self.assertEqual(ExpenseService(self.ana).dashboard().total_owed, Decimal('30.00'))

    def test_mark_participant_settled_and_group_closes(self):
        group = self._group()
        with self.assertRaises(PermissionError):
            ExpenseService(self.ana).mark_participant_settled(group, self.ben)

        self.service.mark_participant_settled(group, self.ana)
        self.service.mark_participant_settled(group, self.ben)
        group.refresh_from_db()
        self.assertEqual(group.status, 'settled')
        self.assertEqual(ExpenseService(self.ana).summaries(), [])

    def test_delete_group_creator_only(self):
        group = self._group()
        with self.assertRaises(PermissionError):
            ExpenseService(self.ana).delete_group(group)
        self.service.delete_group(group)
        self.assertFalse(ExpenseGroup.objects.exists())
        self.assertFalse(ExpenseParticipant.objects.exists())


class ExpenseApiTest(APITestCase):
    def setUp(self):
        self.creator = make_user('creator@example.com')
        self.ana = make_user('ana@example.com')

    def test_create_and_settle_over_api(self):
        self.client.force_authenticate(self.creator)
        response = self.client.post(
            reverse('expenses'),
            {'name': 'Groceries', 'total_amount': '45.50', 'split_type': 'equal', 'participants': [self.creator.pk, self.ana.pk]},
            format='json',
        )
        self.assertEqual(response.status_code, 201, response.data)
        group_id = response.data['group']['id']

        self.client.force_authenticate(self.ana)
        expenses = self.client.get(reverse('expenses')).data['expenses']
        self.assertEqual(expenses[0]['amount_owed'], '22.75')
        response = self.client.post(
            reverse('expense_settlements', args=[group_id]),
            {'amount': '22.75', 'payment_method': 'cash'},
            format='json',
        )
        self.assertEqual(response.status_code, 201, response.data)
        settlement_id = response.data['settlement']['id']

        response = self.client.post(reverse('settlement_review', args=[settlement_id]), {'approved': True}, format='json')
        self.assertEqual(response.status_code, 403)

        self.client.force_authenticate(self.creator)
        response = self.client.post(reverse('settlement_review', args=[settlement_id]), {'approved': True}, format='json')
        self.assertTrue(response.data['approved'])
        dashboard = self.client.get(reverse('expense_dashboard')).data['dashboard']
        self.assertEqual(dashboard['active_expenses'], [])
        self.assertEqual(dashboard['total_to_receive'], '0.00')
