"""
JSON API for account management: ID generation, sign-up, admin account
operations and the first-login password change.
"""
import json
import logging

from django.contrib import auth
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from . import services
from .access import DASHBOARD_PATHS, get_account, resolve_redirect, role_required, dashboard_path
from .exceptions import AccountServiceError, IdentifierError
from .forms import (
    ChangePasswordForm, EventApplicationForm, LoginForm, MemberCreateForm, ParticipantSignupForm, RoleForm,
)
from .identifiers import IdentifierAllocator
from .models import Account, Event

logger = logging.getLogger(__name__)

ALL_ROLES = tuple(DASHBOARD_PATHS)

SERVICE_ERROR_STATUS = {
    'unauthenticated': 401,
    'permission-denied': 403,
    'not-found': 404,
    'email-already-in-use': 409,
    'already-exists': 409,
    'already-registered': 409,
    'not-eligible': 403,
}


def get_allocator():
    return IdentifierAllocator()


def _parse_body_json(request):
    """Read JSON body and return dict. Return {} if not JSON or invalid."""
    if request.content_type and 'application/json' in request.content_type:
        try:
            body = json.loads(request.body)
            return body if isinstance(body, dict) else {}
        except (json.JSONDecodeError, TypeError):
            pass
    return {}


def _payload(request):
    """Request data from a JSON body, falling back to form fields."""
    return _parse_body_json(request) or request.POST


def _account_json(account):
    return {
        'id': account.pk,
        'email': account.email,
        'role': account.role,
        'custom_id': account.custom_id,
        'name': account.full_name,
        'is_first_login': account.is_first_login,
        'is_active': account.is_active,
    }


def _form_error(form):
    return JsonResponse({
        'error': 'invalid-argument',
        'message': 'Form validation failed',
        'errors': form.errors,
    }, status=400)


def _service_error(e):
    return JsonResponse({'error': e.code, 'message': e.message},
                        status=SERVICE_ERROR_STATUS.get(e.code, 400))


def _identifier_error(e):
    logger.warning(f"Account operation aborted: {e}")
    return JsonResponse({'error': e.code, 'message': e.message}, status=503)


@csrf_exempt
@require_http_methods(["POST"])
@role_required(*ALL_ROLES)
def generate_identifier(request):
    """
    Allocate a free ID for a role without assigning it.
    Participant IDs may be requested by anyone signed in; other roles need an admin.
    """
    form = RoleForm(_payload(request))
    if not form.is_valid():
        return _form_error(form)
    role = form.cleaned_data['role']
    if role != Account.ROLE_PARTICIPANT and not request.account.is_admin:
        return JsonResponse({
            'error': 'permission-denied',
            'message': f'Admin access required for {role} IDs',
        }, status=403)

    result = get_allocator().allocate(role)
    try:
        custom_id = result.unwrap()
    except IdentifierError as e:
        return _identifier_error(e)
    return JsonResponse({'custom_id': custom_id, 'attempts': result.attempts})


@csrf_exempt
@require_http_methods(["POST"])
def register_participant(request):
    form = ParticipantSignupForm(_payload(request))
    if not form.is_valid():
        return _form_error(form)
    try:
        account = services.register_participant(
            form.cleaned_data['email'],
            form.cleaned_data['password'],
            form.personal_details(),
            form.educational_details(),
            allocator=get_allocator(),
        )
    except AccountServiceError as e:
        return _service_error(e)
    except IdentifierError as e:
        return _identifier_error(e)

    auth.login(request, account.user, backend='django.contrib.auth.backends.ModelBackend')
    return JsonResponse({
        'status': 'success',
        'user': _account_json(account),
        'redirect_to': dashboard_path(account.role),
    }, status=201)


@csrf_exempt
@require_http_methods(["POST"])
def login(request):
    form = LoginForm(_payload(request))
    if not form.is_valid():
        return _form_error(form)
    user = auth.authenticate(
        request, username=form.cleaned_data['email'], password=form.cleaned_data['password']
    )
    account = getattr(user, 'account', None) if user is not None else None
    if account is None:
        return JsonResponse({
            'error': 'invalid-credentials',
            'message': 'Incorrect email or password',
        }, status=401)
    if not account.is_active:
        return JsonResponse({
            'error': 'account-disabled',
            'message': 'This account has been disabled',
        }, status=403)

    auth.login(request, user)
    services.record_login(account)
    redirect_to = resolve_redirect(account, (account.role,), dashboard_path(account.role))
    return JsonResponse({
        'status': 'success',
        'user': _account_json(account),
        'redirect_to': redirect_to or dashboard_path(account.role),
    })


@csrf_exempt
@require_http_methods(["POST"])
def logout(request):
    auth.logout(request)
    return JsonResponse({'status': 'success'})


@require_http_methods(["GET"])
def redirect_decision(request):
    """
    Where should the current user go for `path`, given the roles the page
    allows (`roles`, comma separated; defaults to every role)?
    """
    path = request.GET.get('path', '')
    roles = [r for r in request.GET.get('roles', '').split(',') if r] or list(ALL_ROLES)
    account = get_account(request)
    return JsonResponse({'redirect_to': resolve_redirect(account, roles, path)})


@csrf_exempt
@require_http_methods(["POST"])
@role_required(Account.ROLE_ADMIN)
def create_member(request):
    form = MemberCreateForm(_payload(request))
    if not form.is_valid():
        return _form_error(form)
    try:
        account, temporary_password = services.create_member(
            request.account,
            form.cleaned_data['email'],
            form.personal_details(),
            allocator=get_allocator(),
        )
    except AccountServiceError as e:
        return _service_error(e)
    except IdentifierError as e:
        return _identifier_error(e)
    return JsonResponse({
        'status': 'success',
        'user': _account_json(account),
        'temporary_password': temporary_password,
    }, status=201)


@csrf_exempt
@require_http_methods(["POST"])
@role_required(Account.ROLE_ADMIN)
def change_role(request, account_id):
    target = get_object_or_404(Account.objects.select_related('user'), pk=account_id)
    form = RoleForm(_payload(request))
    if not form.is_valid():
        return _form_error(form)
    old_custom_id = target.custom_id
    try:
        services.change_role(request.account, target, form.cleaned_data['role'], allocator=get_allocator())
    except AccountServiceError as e:
        return _service_error(e)
    except IdentifierError as e:
        return _identifier_error(e)
    return JsonResponse({
        'status': 'success',
        'user': _account_json(target),
        'old_custom_id': old_custom_id,
    })


@csrf_exempt
@require_http_methods(["POST"])
@role_required(Account.ROLE_ADMIN)
def delete_user(request, account_id):
    target = get_object_or_404(Account.objects.select_related('user'), pk=account_id)
    try:
        removed = services.delete_account(request.account, target)
    except AccountServiceError as e:
        return _service_error(e)
    return JsonResponse({'success': True, 'registrations_deleted': removed})


@csrf_exempt
@require_http_methods(["POST"])
@role_required(*ALL_ROLES)
def change_password(request):
    form = ChangePasswordForm(_payload(request))
    if not form.is_valid():
        return _form_error(form)
    try:
        account = services.complete_first_login(request.account, form.cleaned_data['new_password'])
    except AccountServiceError as e:
        return _service_error(e)
    # Changing the password rotates the session hash; keep the user signed in
    auth.update_session_auth_hash(request, account.user)
    return JsonResponse({
        'status': 'success',
        'user': _account_json(account),
        'redirect_to': dashboard_path(account.role),
    })


@require_http_methods(["GET"])
@role_required(Account.ROLE_ADMIN)
def event_registrations(request, event_id):
    event = get_object_or_404(Event, pk=event_id)
    try:
        data = services.export_event_registrations(request.account, event)
    except AccountServiceError as e:
        return _service_error(e)
    return JsonResponse(data)


@csrf_exempt
@require_http_methods(["POST"])
@role_required(Account.ROLE_PARTICIPANT)
def register_for_event(request, event_id):
    event = get_object_or_404(Event, pk=event_id)
    form = EventApplicationForm(_payload(request))
    if not form.is_valid():
        return _form_error(form)
    try:
        registration = services.register_for_event(
            request.account,
            event,
            team_name=form.cleaned_data['team_name'],
            team_members=form.cleaned_data['team_members'],
        )
    except AccountServiceError as e:
        return _service_error(e)
    return JsonResponse({
        'status': 'success',
        'registration_id': registration.pk,
        'team_name': registration.team_name or 'Individual',
        'team_members': registration.team_members,
        'payment_status': registration.payment_status,
    }, status=201)
