"""
Role-based access rules: which dashboard a role lands on, and when a request
must be redirected (not signed in, wrong role, pending first-login password
change).
"""
from functools import wraps

from django.conf import settings
from django.http import JsonResponse

DASHBOARD_PATHS = {
    'admin': '/admin-dashboard',
    'member': '/member-dashboard',
    'participant': '/participant-dashboard',
    'manager': '/manager-dashboard',
}

CHANGE_PASSWORD_PATH = '/member-dashboard/change-password'


def dashboard_path(role):
    return DASHBOARD_PATHS.get(role, '/')


def login_path():
    return getattr(settings, 'LOGIN_PATH', '/login')


def needs_password_change(account, path=''):
    return (
        account.role == 'member'
        and account.is_first_login
        and 'change-password' not in (path or '')
    )


def resolve_redirect(account, allowed_roles, path=''):
    """
    Return None if `account` may open `path`, otherwise the path to send it to.
    """
    if account is None:
        return login_path()
    if account.role not in allowed_roles:
        return dashboard_path(account.role)
    if needs_password_change(account, path):
        return CHANGE_PASSWORD_PATH
    return None


def get_account(request):
    """Account of the signed-in user, or None."""
    user = getattr(request, 'user', None)
    if user is None or not user.is_authenticated:
        return None
    return getattr(user, 'account', None)


def role_required(*roles):
    """
    Guard a JSON view: 401 without an account, 403 for other roles,
    409 while a member still has to change the first-login password.
    The account is passed to the view as `request.account`.
    """
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            account = get_account(request)
            if account is None:
                return JsonResponse({
                    'error': 'unauthenticated',
                    'message': 'User must be authenticated',
                    'redirect_to': login_path(),
                }, status=401)
            if not account.is_active:
                return JsonResponse({
                    'error': 'account-disabled',
                    'message': 'This account has been disabled',
                }, status=403)
            redirect_to = resolve_redirect(account, roles, request.path)
            if redirect_to == CHANGE_PASSWORD_PATH:
                return JsonResponse({
                    'error': 'password-change-required',
                    'message': 'Please change your temporary password first',
                    'redirect_to': redirect_to,
                }, status=409)
            if redirect_to is not None:
                return JsonResponse({
                    'error': 'permission-denied',
                    'message': f"{', '.join(roles).title()} access required",
                    'redirect_to': redirect_to,
                }, status=403)
            request.account = account
            return view_func(request, *args, **kwargs)
        return _wrapped
    return decorator
