# users/session.py
"""
Explicit session lifecycle for authenticated staff.

A ``SessionContext`` is issued at login, stored in the Django session and
handed to every gated operation as a parameter. The ``SessionManager`` owns
an ``IdleTimer`` per request: activity pushes the deadline forward, and once
the deadline passes the session is invalidated and ``session_expired`` fires.
"""
import logging
from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from django.conf import settings
from django.contrib.auth import logout
from django.dispatch import Signal
from django.utils import timezone

from .models import Role

logger = logging.getLogger(__name__)

SESSION_CONTEXT_KEY = '_session_context'

# Sent with sender=SessionManager, context=<SessionContext>, request=<HttpRequest>
session_expired = Signal()

DEFAULT_IDLE_TIMEOUT = 30 * 60


@dataclass(frozen=True)
class SessionContext:
    """Identity, role and tenant of the signed-in user"""
    user_id: int
    username: str
    role: str
    clinic_id: str
    issued_at: datetime
    last_activity: datetime

    @classmethod
    def for_user(cls, user, now=None):
        now = now or timezone.now()
        return cls(
            user_id=user.pk,
            username=user.get_username(),
            role=user.role_name,
            clinic_id=str(user.clinic_id) if user.clinic_id else None,
            issued_at=now,
            last_activity=now,
        )

    @property
    def is_admin(self):
        return self.role == Role.ADMIN

    @property
    def can_write(self):
        return self.role in Role.WRITER_ROLES

    @property
    def is_unassigned(self):
        """A non-admin with no clinic, who sees no clinic's records"""
        return not self.is_admin and not self.clinic_id

    def touched(self, now):
        return replace(self, last_activity=now)

    def to_dict(self):
        return {
            'user_id': self.user_id,
            'username': self.username,
            'role': self.role,
            'clinic_id': self.clinic_id,
            'issued_at': self.issued_at.isoformat(),
            'last_activity': self.last_activity.isoformat(),
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            user_id=data['user_id'],
            username=data['username'],
            role=data.get('role'),
            clinic_id=data.get('clinic_id'),
            issued_at=datetime.fromisoformat(data['issued_at']),
            last_activity=datetime.fromisoformat(data['last_activity']),
        )


class IdleTimer:
    """
    Deadline-based inactivity timer.

    ``schedule`` arms the timer from a point in time, ``cancel`` disarms it and
    ``touch`` does both, which is what user activity does.
    """

    def __init__(self, timeout):
        self.timeout = timedelta(seconds=timeout)
        self.deadline = None

    def schedule(self, start):
        self.deadline = start + self.timeout
        return self.deadline

    def cancel(self):
        self.deadline = None

    def touch(self, now):
        self.cancel()
        return self.schedule(now)

    @property
    def is_armed(self):
        return self.deadline is not None

    def expired(self, now):
        return self.is_armed and now >= self.deadline


class SessionManager:
    """Issues, refreshes and invalidates session contexts"""

    def __init__(self, timeout=None, clock=None):
        if timeout is None:
            timeout = getattr(settings, 'SESSION_IDLE_TIMEOUT', DEFAULT_IDLE_TIMEOUT)
        self.timeout = timeout
        self.clock = clock or timezone.now

    def timer_for(self, context):
        timer = IdleTimer(self.timeout)
        timer.schedule(context.last_activity)
        return timer

    def issue(self, request, user):
        """Create a fresh context at login"""
        context = SessionContext.for_user(user, now=self.clock())
        request.session[SESSION_CONTEXT_KEY] = context.to_dict()
        logger.info(f"Session issued for {context.username} ({context.role})")
        return context

    def current(self, request):
        data = request.session.get(SESSION_CONTEXT_KEY)
        if not data:
            return None
        try:
            return SessionContext.from_dict(data)
        except (KeyError, TypeError, ValueError):
            logger.warning("Discarding malformed session context")
            request.session.pop(SESSION_CONTEXT_KEY, None)
            return None

    def touch(self, request, context):
        """Record activity: cancel the pending expiry and schedule a new one"""
        now = self.clock()
        timer = self.timer_for(context)
        timer.touch(now)
        context = context.touched(now)
        request.session[SESSION_CONTEXT_KEY] = context.to_dict()
        return context

    def is_expired(self, context):
        return self.timer_for(context).expired(self.clock())

    def invalidate(self, request, reason='logout'):
        """Drop the context and sign the user out"""
        context = self.current(request)
        request.session.pop(SESSION_CONTEXT_KEY, None)
        if reason == 'timeout' and context is not None:
            logger.info(f"Session for {context.username} expired after {self.timeout}s of inactivity")
            session_expired.send(sender=self.__class__, context=context, request=request)
        logout(request)
        return context

    def resolve(self, request):
        """
        Return the live context for an authenticated request.

        Issues one when the user authenticated without going through the
        login view (e.g. admin login) and returns None when the idle timer
        has run out, in which case the session has already been invalidated.
        """
        user = request.user
        context = self.current(request)
        if context is None or context.user_id != user.pk:
            return self.issue(request, user)
        if self.is_expired(context):
            self.invalidate(request, reason='timeout')
            return None
        return self.touch(request, context)
