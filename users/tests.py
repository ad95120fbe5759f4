# users/tests.py
"""
Tests for roles, session contexts, idle sign-out and access checks
"""
from datetime import timedelta

from django.contrib.auth.models import AnonymousUser
from django.contrib.sessions.backends.db import SessionStore
from django.test import RequestFactory, SimpleTestCase, TestCase, override_settings
from django.urls import reverse
from django.utils import timezone

from clinics.models import Clinic
from core.models import AuditLog
from core.testing import make_user
from patients.models import Patient

from .models import Role
from .permissions import AccessDenied, require_role, require_session, require_write
from .session import SESSION_CONTEXT_KEY, IdleTimer, SessionContext, SessionManager, session_expired


def context_for(role, clinic_id=None, now=None):
    now = now or timezone.now()
    return SessionContext(
        user_id=1,
        username='someone',
        role=role,
        clinic_id=clinic_id,
        issued_at=now,
        last_activity=now,
    )


class RoleModelTest(TestCase):

    def test_display_name_defaults_from_choices(self):
        role = Role.objects.create(name=Role.CLINIC_STAFF)
        self.assertEqual(role.display_name, 'Clinic Staff')

    def test_read_only_cannot_write(self):
        self.assertFalse(Role(name=Role.READ_ONLY).can_write)
        self.assertTrue(Role(name=Role.CLINIC_STAFF).can_write)
        self.assertTrue(Role(name=Role.ADMIN).can_write)

    def test_superuser_is_admin(self):
        user = make_user('root', is_superuser=True)
        self.assertEqual(user.role_name, Role.ADMIN)
        self.assertTrue(user.is_admin)


class SessionContextTest(TestCase):

    def test_for_user(self):
        clinic = Clinic.objects.create(name='Centro')
        user = make_user('ana', Role.CLINIC_STAFF, clinic=clinic)

        context = SessionContext.for_user(user)

        self.assertEqual(context.username, 'ana')
        self.assertEqual(context.role, Role.CLINIC_STAFF)
        self.assertEqual(context.clinic_id, str(clinic.pk))
        self.assertTrue(context.can_write)
        self.assertFalse(context.is_admin)

    def test_round_trip_through_session_storage(self):
        context = context_for(Role.READ_ONLY, clinic_id='abc')
        self.assertEqual(SessionContext.from_dict(context.to_dict()), context)

    def test_write_access_follows_role(self):
        self.assertTrue(context_for(Role.ADMIN).can_write)
        self.assertTrue(context_for(Role.CLINIC_STAFF, clinic_id='abc').can_write)
        self.assertFalse(context_for(Role.READ_ONLY).can_write)
        self.assertFalse(context_for(None).can_write)

    def test_unassigned_non_admin(self):
        self.assertTrue(context_for(Role.CLINIC_STAFF).is_unassigned)
        self.assertTrue(context_for(None).is_unassigned)
        self.assertFalse(context_for(Role.CLINIC_STAFF, clinic_id='abc').is_unassigned)
        self.assertFalse(context_for(Role.ADMIN).is_unassigned)


class IdleTimerTest(SimpleTestCase):

    def test_touch_reschedules_the_deadline(self):
        start = timezone.now()
        timer = IdleTimer(60)
        timer.schedule(start)

        self.assertFalse(timer.expired(start + timedelta(seconds=59)))
        self.assertTrue(timer.expired(start + timedelta(seconds=60)))

        timer.touch(start + timedelta(seconds=50))
        self.assertFalse(timer.expired(start + timedelta(seconds=100)))
        self.assertTrue(timer.expired(start + timedelta(seconds=110)))

    def test_cancelled_timer_never_expires(self):
        timer = IdleTimer(1)
        timer.schedule(timezone.now() - timedelta(hours=1))
        timer.cancel()
        self.assertFalse(timer.is_armed)
        self.assertFalse(timer.expired(timezone.now()))


class SessionManagerTest(TestCase):

    def setUp(self):
        self.user = make_user('ana', Role.CLINIC_STAFF)
        self.now = timezone.now()
        self.factory = RequestFactory()

    def make_request(self):
        request = self.factory.get('/')
        request.session = SessionStore()
        request.user = self.user
        return request

    def manager_at(self, now):
        return SessionManager(timeout=60, clock=lambda: now)

    def test_issue_and_resolve(self):
        request = self.make_request()
        issued = self.manager_at(self.now).issue(request, self.user)
        resolved = self.manager_at(self.now + timedelta(seconds=30)).resolve(request)

        self.assertEqual(resolved.user_id, issued.user_id)
        self.assertEqual(resolved.last_activity, self.now + timedelta(seconds=30))

    def test_activity_keeps_session_alive(self):
        request = self.make_request()
        self.manager_at(self.now).issue(request, self.user)
        for seconds in (50, 100, 150):
            self.assertIsNotNone(self.manager_at(self.now + timedelta(seconds=seconds)).resolve(request))

    def test_idle_session_is_invalidated(self):
        received = []

        def on_expired(sender, context, **kwargs):
            received.append(context)

        session_expired.connect(on_expired)
        self.addCleanup(session_expired.disconnect, on_expired)

        request = self.make_request()
        self.manager_at(self.now).issue(request, self.user)
        resolved = self.manager_at(self.now + timedelta(seconds=61)).resolve(request)

        self.assertIsNone(resolved)
        self.assertEqual(len(received), 1)
        self.assertEqual(received[0].username, 'ana')
        self.assertNotIn(SESSION_CONTEXT_KEY, request.session)
        self.assertIsInstance(request.user, AnonymousUser)

    def test_logout_does_not_signal_expiry(self):
        received = []

        def on_expired(sender, **kwargs):
            received.append(True)

        session_expired.connect(on_expired)
        self.addCleanup(session_expired.disconnect, on_expired)

        request = self.make_request()
        self.manager_at(self.now).issue(request, self.user)
        self.manager_at(self.now).invalidate(request, reason='logout')

        self.assertEqual(received, [])
        self.assertIsNone(self.manager_at(self.now).current(request))

    def test_context_for_another_user_is_replaced(self):
        request = self.make_request()
        self.manager_at(self.now).issue(request, make_user('other', Role.ADMIN))
        context = self.manager_at(self.now).resolve(request)
        self.assertEqual(context.username, 'ana')

    def test_malformed_context_is_discarded(self):
        request = self.make_request()
        request.session[SESSION_CONTEXT_KEY] = {'user_id': self.user.pk}
        self.assertIsNone(self.manager_at(self.now).current(request))


class PermissionChecksTest(SimpleTestCase):

    def test_missing_session_is_denied(self):
        with self.assertRaises(AccessDenied):
            require_session(None)

    def test_role_check(self):
        require_role(context_for(Role.ADMIN), Role.ADMIN)
        with self.assertRaises(AccessDenied):
            require_role(context_for(Role.CLINIC_STAFF), Role.ADMIN, 'clinics')

    def test_read_only_may_read_but_not_write(self):
        session = context_for(Role.READ_ONLY)
        require_session(session)
        with self.assertRaises(AccessDenied) as ctx:
            require_write(session, 'expenses')
        self.assertEqual(ctx.exception.module, 'expenses')

    def test_user_without_role_is_read_only(self):
        with self.assertRaises(AccessDenied):
            require_write(context_for(None), 'patients')


@override_settings(REPORT_FETCH_WORKERS=1)
class ScreenAccessTest(TestCase):
    """Any signed-in session may open the non-admin screens"""

    def setUp(self):
        self.clinic = Clinic.objects.create(name='Centro')
        Patient.objects.create(name='Maria Souza', clinic=self.clinic)

    def test_user_without_role_can_read_but_not_write(self):
        self.client.force_login(make_user('nobody', clinic=self.clinic))

        response = self.client.get(reverse('patients:list'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['total_count'], 1)

        response = self.client.post(reverse('patients:create'), {'name': 'Novo Paciente'})
        self.assertRedirects(response, reverse('core:dashboard'), fetch_redirect_response=False)
        self.assertEqual(Patient.objects.count(), 1)

    def test_read_only_user_opens_every_non_admin_screen(self):
        self.client.force_login(make_user('viewer', Role.READ_ONLY, clinic=self.clinic))
        for name in ('core:dashboard', 'reports:dashboard', 'patients:list', 'appointments:list',
                     'expenses:list', 'campaigns:list'):
            self.assertEqual(self.client.get(reverse(name)).status_code, 200, name)

    def test_admin_screens_stay_admin_only(self):
        self.client.force_login(make_user('viewer', Role.READ_ONLY, clinic=self.clinic))
        response = self.client.get(reverse('clinics:list'))
        self.assertRedirects(response, reverse('core:dashboard'), fetch_redirect_response=False)

    def test_unassigned_staff_sees_no_clinic_records(self):
        self.client.force_login(make_user('drifter', Role.CLINIC_STAFF))

        response = self.client.get(reverse('patients:list'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['total_count'], 0)

        response = self.client.post(reverse('patients:create'), {'name': 'Novo Paciente'})
        self.assertRedirects(response, reverse('core:dashboard'), fetch_redirect_response=False)
        self.assertEqual(Patient.objects.count(), 1)


class AuthenticationFlowTest(TestCase):
    """Login, logout and idle sign-out through the middleware"""

    def setUp(self):
        self.user = make_user('ana', Role.CLINIC_STAFF)

    def test_login_issues_session_context(self):
        response = self.client.post(reverse('users:login'), {'username': 'ana', 'password': 'Str0ng!pass'})
        self.assertRedirects(response, reverse('core:dashboard'), fetch_redirect_response=False)
        self.assertEqual(self.client.session[SESSION_CONTEXT_KEY]['username'], 'ana')
        self.assertTrue(AuditLog.objects.filter(action=AuditLog.LOGIN, user=self.user).exists())

    def test_failed_login_is_audited(self):
        self.client.post(reverse('users:login'), {'username': 'ana', 'password': 'wrong'})
        self.assertTrue(AuditLog.objects.filter(action=AuditLog.LOGIN_FAILED, object_repr='ana').exists())

    def test_logout_clears_session(self):
        self.client.force_login(self.user)
        response = self.client.post(reverse('users:logout'))
        self.assertRedirects(response, reverse('users:login'), fetch_redirect_response=False)
        self.assertNotIn(SESSION_CONTEXT_KEY, self.client.session)
        self.assertTrue(AuditLog.objects.filter(action=AuditLog.LOGOUT, user=self.user).exists())

    def test_idle_request_is_sent_to_login(self):
        self.client.force_login(self.user)
        session = self.client.session
        data = session[SESSION_CONTEXT_KEY]
        data['last_activity'] = (timezone.now() - timedelta(hours=2)).isoformat()
        session[SESSION_CONTEXT_KEY] = data
        session.save()

        response = self.client.get(reverse('patients:list'))

        self.assertEqual(response.status_code, 302)
        self.assertIn(reverse('users:login'), response['Location'])
        self.assertIn('next=', response['Location'])
        self.assertTrue(AuditLog.objects.filter(action=AuditLog.SESSION_EXPIRED, user=self.user).exists())

        # The session is gone: the next request is anonymous
        response = self.client.get(reverse('patients:list'))
        self.assertEqual(response.status_code, 302)

    def test_authenticated_pages_are_not_cached(self):
        self.client.force_login(self.user)
        response = self.client.get(reverse('patients:list'))
        self.assertIn('no-store', response['Cache-Control'])
