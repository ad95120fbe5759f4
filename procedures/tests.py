# procedures/tests.py
from decimal import Decimal

from django.test import SimpleTestCase, TestCase
from django.urls import reverse

from core.testing import make_user
from users.models import Role

from .models import Procedure
from .views import format_duration, format_optional_currency


class ProcedureModelTest(SimpleTestCase):

    def test_margin(self):
        self.assertEqual(Procedure(price=Decimal('300'), cost=Decimal('120')).margin, Decimal('180'))
        self.assertIsNone(Procedure(price=Decimal('300')).margin)

    def test_str_includes_code(self):
        self.assertEqual(str(Procedure(name='Limpeza', code='LMP')), 'Limpeza (LMP)')
        self.assertEqual(str(Procedure(name='Limpeza')), 'Limpeza')

    def test_list_formatters(self):
        self.assertEqual(format_duration(45), '45 min')
        self.assertEqual(format_duration(None), '—')
        self.assertEqual(format_optional_currency(None), '—')


class ProcedureViewsTest(TestCase):

    def setUp(self):
        self.client.force_login(make_user('boss', Role.ADMIN))

    def test_create(self):
        response = self.client.post(reverse('procedures:create'), {
            'name': 'Clareamento',
            'code': 'CLR',
            'category': 'Estética',
            'price': '800.00',
            'cost': '250.00',
            'duration': '60',
        })
        self.assertRedirects(response, reverse('procedures:list'), fetch_redirect_response=False)
        procedure = Procedure.objects.get()
        self.assertEqual(procedure.price, Decimal('800.00'))
        self.assertEqual(procedure.margin, Decimal('550.00'))

    def test_negative_price_is_rejected(self):
        response = self.client.post(reverse('procedures:create'), {'name': 'Clareamento', 'price': '-1'})
        self.assertEqual(response.status_code, 200)
        self.assertIn('price', response.context['form'].errors)

    def test_search(self):
        Procedure.objects.create(name='Clareamento', code='CLR')
        Procedure.objects.create(name='Limpeza', code='LMP')
        response = self.client.get(reverse('procedures:list'), {'search': 'lmp'})
        self.assertEqual(response.context['total_count'], 1)
        self.assertEqual(response.context['search'], 'lmp')
