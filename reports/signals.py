# reports/signals.py
from django.contrib.auth.signals import user_logged_out
from django.dispatch import receiver

from .coordinator import gate_key, report_gate


@receiver(user_logged_out, dispatch_uid='reports_forget_report_tickets')
def forget_report_tickets(sender, request, user, **kwargs):
    """Drop the session's report tickets on logout and idle expiry"""
    if request is None or user is None:
        return
    report_gate.forget(gate_key(request, user.pk), f"user-{user.pk}")
