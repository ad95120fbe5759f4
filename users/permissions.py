# users/permissions.py
"""
Session and role checks shared by the resource repositories and the views.

Checks take the explicit ``SessionContext`` rather than ``request.user`` so
the same rule applies whether the caller is a view, a command or a test.
"""
import logging

from django.contrib import messages
from django.contrib.auth.mixins import LoginRequiredMixin
from django.shortcuts import redirect

logger = logging.getLogger(__name__)


class AccessDenied(Exception):
    """The session may not perform the requested operation"""

    def __init__(self, message, module=None):
        self.message = message
        self.module = module
        super().__init__(message)


def require_session(session):
    if session is None:
        raise AccessDenied('You must be signed in to do that.')


def require_role(session, role, module=None):
    require_session(session)
    if session.role != role:
        logger.warning(f"{session.username} ({session.role}) denied {module or 'resource'}: requires {role}")
        raise AccessDenied(f'Only {role.replace("_", " ")} users can manage this.', module)


def require_write(session, module=None):
    require_session(session)
    if not session.can_write:
        logger.warning(f"{session.username} ({session.role}) denied write on {module}")
        raise AccessDenied('Your account has read-only access.', module)


class SessionRequiredMixin(LoginRequiredMixin):
    """
    Resolve the session context for the view and apply the role check, if any.

    Denied requests get a flash message and a redirect to the dashboard, the
    same access-denied state every screen shows.
    """
    required_role = None
    denied_url = 'core:dashboard'

    def dispatch(self, request, *args, **kwargs):
        if not request.user.is_authenticated:
            return self.handle_no_permission()

        self.session_context = getattr(request, 'session_context', None)
        try:
            self.check_access(self.session_context)
        except AccessDenied as e:
            messages.error(request, e.message)
            return redirect(self.denied_url)
        return super().dispatch(request, *args, **kwargs)

    def check_access(self, session):
        require_session(session)
        if self.required_role:
            require_role(session, self.required_role)
