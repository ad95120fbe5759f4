# core/middleware.py
"""
Request middleware: session context resolution with idle sign-out, and
no-cache headers for authenticated pages.
"""
from django.contrib import messages
from django.contrib.auth.views import redirect_to_login
from django.urls import reverse
from django.utils.cache import add_never_cache_headers

from users.session import SessionManager


class IdleTimeoutMiddleware:
    """
    Attach ``request.session_context`` for authenticated users.

    Every authenticated request counts as activity and pushes the idle
    deadline forward. A request that arrives after the deadline is signed out
    and sent to the login page with ``next`` set.
    """

    def __init__(self, get_response):
        self.get_response = get_response
        self.manager = SessionManager()

    def __call__(self, request):
        request.session_context = None

        user = getattr(request, 'user', None)
        if user is not None and user.is_authenticated:
            context = self.manager.resolve(request)
            if context is None:
                messages.warning(request, 'Your session expired due to inactivity. Please sign in again.')
                return redirect_to_login(
                    request.get_full_path(),
                    login_url=reverse('users:login'),
                )
            request.session_context = context

        return self.get_response(request)


class NoCacheMiddleware:
    """
    Prevent browsers from caching authenticated pages so the back button
    does not reveal data after logout.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)

        if getattr(request, 'session_context', None) is not None:
            add_never_cache_headers(response)
            response['Pragma'] = 'no-cache'
            response['Expires'] = '0'

        return response
