# expenses/tests.py
from datetime import date
from decimal import Decimal

from django.test import TestCase
from django.urls import reverse

from clinics.models import Clinic
from core.testing import make_user
from users.models import Role

from .models import Expense


class ExpenseViewsTest(TestCase):

    def setUp(self):
        self.clinic = Clinic.objects.create(name='Centro')
        self.admin = make_user('boss', Role.ADMIN)
        self.client.force_login(self.admin)

    def test_admin_chooses_the_clinic(self):
        response = self.client.post(reverse('expenses:create'), {
            'clinic': str(self.clinic.pk),
            'description': 'Aluguel',
            'amount': '3500.00',
            'date': '2024-03-05',
            'category': 'rent',
            'is_recurring': 'on',
        })
        self.assertRedirects(response, reverse('expenses:list'), fetch_redirect_response=False)
        expense = Expense.objects.get()
        self.assertEqual(expense.clinic, self.clinic)
        self.assertTrue(expense.is_recurring)
        self.assertEqual(expense.created_by, self.admin)

    def test_clinic_is_required(self):
        response = self.client.post(reverse('expenses:create'), {
            'description': 'Aluguel', 'amount': '3500.00', 'date': '2024-03-05',
        })
        self.assertEqual(response.status_code, 200)
        self.assertIn('clinic', response.context['form'].errors)

    def test_list_formats_rows(self):
        Expense.objects.create(
            clinic=self.clinic, description='Luvas', amount=Decimal('42.5'), date=date(2024, 3, 5), category='supplies'
        )
        response = self.client.get(reverse('expenses:list'))
        cells = response.context['rows'][0]['cells']
        self.assertEqual(cells[1], 'Luvas')
        self.assertEqual(cells[2], 'Supplies')
        self.assertEqual(cells[5], 'No')
        self.assertEqual(cells[6], 'Centro')
