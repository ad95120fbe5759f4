# core/signals.py
"""
Audit trail receivers.

Resource writes are recorded from ``resource_written`` rather than model
``post_save`` so each entry carries the acting session instead of a
thread-local user.
"""
import logging

from django.contrib.auth.signals import user_logged_in, user_logged_out, user_login_failed
from django.dispatch import receiver

from users.session import SessionManager, session_expired

from .datasource import INSERT
from .models import AuditLog
from .repository import resource_written

logger = logging.getLogger(__name__)


@receiver(resource_written, dispatch_uid='audit_resource_written')
def log_resource_write(sender, session, table, operation, record, fields, **kwargs):
    """Log create and update actions made through a repository"""
    action = AuditLog.CREATE if operation == INSERT else AuditLog.UPDATE
    label = record.get('name') or record.get('description') or record.get('patient_name') or ''
    verb = 'Created' if action == AuditLog.CREATE else 'Updated'

    AuditLog.record(
        action,
        table,
        user_id=session.user_id,
        object_id=record.get('id'),
        object_repr=label,
        changes=fields,
        description=f"{verb} {table} record {label}".strip(),
    )


@receiver(user_logged_in, dispatch_uid='audit_user_logged_in')
def log_user_login(sender, request, user, **kwargs):
    """Issue the session context and log the login"""
    if request is not None and hasattr(request, 'session'):
        SessionManager().issue(request, user)
    AuditLog.record(
        AuditLog.LOGIN,
        'users',
        user_id=user.pk,
        object_id=user.pk,
        object_repr=user.get_username(),
        description='User logged in',
        request=request,
    )


@receiver(user_logged_out, dispatch_uid='audit_user_logged_out')
def log_user_logout(sender, request, user, **kwargs):
    if user is None:
        return
    AuditLog.record(
        AuditLog.LOGOUT,
        'users',
        user_id=user.pk,
        object_id=user.pk,
        object_repr=user.get_username(),
        description='User logged out',
        request=request,
    )


@receiver(user_login_failed, dispatch_uid='audit_user_login_failed')
def log_failed_login(sender, credentials, request=None, **kwargs):
    username = credentials.get('username') or 'Unknown'
    logger.warning(f"Failed login attempt for {username}")
    AuditLog.record(
        AuditLog.LOGIN_FAILED,
        'users',
        object_repr=username,
        description=f"Failed login attempt for {username}",
        request=request,
    )


@receiver(session_expired, dispatch_uid='audit_session_expired')
def log_session_expired(sender, context, request=None, **kwargs):
    AuditLog.record(
        AuditLog.SESSION_EXPIRED,
        'users',
        user_id=context.user_id,
        object_id=context.user_id,
        object_repr=context.username,
        description='Session expired after inactivity',
        request=request,
    )
