# clinics/tests.py
from django.test import TestCase
from django.urls import reverse

from core.models import AuditLog
from core.testing import make_user
from users.models import Role

from .models import Clinic


class ClinicViewsTest(TestCase):

    def setUp(self):
        self.admin = make_user('boss', Role.ADMIN)
        self.client.force_login(self.admin)

    def test_list_is_ordered_by_name(self):
        Clinic.objects.create(name='Sul')
        Clinic.objects.create(name='Centro')

        response = self.client.get(reverse('clinics:list'))

        self.assertEqual(response.status_code, 200)
        names = [row['cells'][0] for row in response.context['rows']]
        self.assertEqual(names, ['Centro', 'Sul'])

    def test_create_normalizes_name(self):
        response = self.client.post(reverse('clinics:create'), {'name': '  Clínica   Norte '})

        self.assertRedirects(response, reverse('clinics:list'), fetch_redirect_response=False)
        clinic = Clinic.objects.get()
        self.assertEqual(clinic.name, 'Clínica Norte')
        self.assertTrue(AuditLog.objects.filter(table='clinics', object_id=str(clinic.pk)).exists())

    def test_short_name_is_rejected(self):
        response = self.client.post(reverse('clinics:create'), {'name': 'X'})
        self.assertEqual(response.status_code, 200)
        self.assertIn('name', response.context['form'].errors)
        self.assertFalse(Clinic.objects.exists())

    def test_rename(self):
        clinic = Clinic.objects.create(name='Centro')
        response = self.client.post(reverse('clinics:update', args=[clinic.pk]), {'name': 'Centro Sul'})
        self.assertRedirects(response, reverse('clinics:list'), fetch_redirect_response=False)
        clinic.refresh_from_db()
        self.assertEqual(clinic.name, 'Centro Sul')

    def test_read_only_user_is_denied(self):
        self.client.force_login(make_user('viewer', Role.READ_ONLY))
        response = self.client.get(reverse('clinics:list'))
        self.assertRedirects(response, reverse('core:dashboard'), fetch_redirect_response=False)
