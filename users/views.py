# users/views.py
import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.contrib.auth.mixins import LoginRequiredMixin
from django.contrib.auth.views import LoginView, PasswordChangeView
from django.shortcuts import redirect
from django.urls import reverse_lazy
from django.views.decorators.cache import never_cache
from django.views.decorators.http import require_http_methods

from .forms import CustomLoginForm, StyledPasswordChangeForm
from .session import SessionManager

logger = logging.getLogger(__name__)


class CustomLoginView(LoginView):
    """Sign-in page; the session context is issued on ``user_logged_in``"""
    template_name = 'registration/login.html'
    authentication_form = CustomLoginForm
    redirect_authenticated_user = True


class CustomPasswordChangeView(LoginRequiredMixin, PasswordChangeView):
    """Password change view that stays on the same page with a success message"""
    template_name = 'registration/password_change_form.html'
    form_class = StyledPasswordChangeForm
    success_url = reverse_lazy('users:password_change')

    def form_valid(self, form):
        messages.success(
            self.request,
            'Your password has been changed successfully.'
        )
        return super().form_valid(form)


@never_cache
@require_http_methods(["GET", "POST"])
@login_required
def custom_logout(request):
    """
    Invalidate the session context, sign out and prevent caching.
    """
    SessionManager().invalidate(request, reason='logout')

    response = redirect('users:login')
    response['Cache-Control'] = 'no-cache, no-store, must-revalidate, max-age=0, private'
    response['Pragma'] = 'no-cache'
    response['Expires'] = '0'
    return response
