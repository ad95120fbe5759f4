# core/context_processors.py
from django.urls import reverse

from core.models import SystemSetting

NAVIGATION = [
    # (label, url name, admin only)
    ('Dashboard', 'core:dashboard', False),
    ('Reports', 'reports:dashboard', False),
    ('Patients', 'patients:list', False),
    ('Appointments', 'appointments:list', False),
    ('Expenses', 'expenses:list', False),
    ('Campaigns', 'campaigns:list', False),
    ('Procedures', 'procedures:list', True),
    ('Clinics', 'clinics:list', True),
]


def clinic_settings(request):
    """Make clinic settings available in all templates"""
    return {
        'CLINIC_NAME': SystemSetting.get_setting('clinic_name', 'Clinic Dashboard'),
    }


def navigation(request):
    """Sidebar entries the signed-in session may open"""
    session = getattr(request, 'session_context', None)
    if session is None:
        return {'nav_items': []}

    items = []
    for label, url_name, admin_only in NAVIGATION:
        if admin_only and not session.is_admin:
            continue
        url = reverse(url_name)
        items.append({
            'label': label,
            'url': url,
            'active': request.path == url or (url != '/' and request.path.startswith(url)),
        })
    return {'nav_items': items, 'session_context': session}
