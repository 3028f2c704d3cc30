"""
Account operations: sign-up, admin-created members, role changes, deletion,
the first-login password flow and event applications.

Every operation takes the acting account explicitly. Failures that the user
should see raise AccountServiceError; ID allocation failures propagate as
AllocationExhausted / StoreUnavailable and abort the whole operation.
"""
import logging
import random
import string

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from .emails import send_temporary_password_email, send_identifier_changed_email
from .exceptions import AccountServiceError
from .identifiers import AccountIdentifierStore, IdentifierAllocator, ROLE_PREFIXES, is_valid_identifier
from .models import Account, ActivityLog, Event, EventRegistration
from .validators import is_valid_email

logger = logging.getLogger(__name__)

TEMPORARY_PASSWORD_CHARS = string.ascii_uppercase + string.ascii_lowercase + string.digits + '!@#$%^&*'
TEMPORARY_PASSWORD_LENGTH = 12

# Fields a user may change on their own profile
PROFILE_FIELDS = {
    'full_name', 'phone', 'dob', 'bio',
    'institution', 'course', 'year',
    'profile_photo_url', 'social_links',
}


def generate_temporary_password(rng=None):
    rng = rng or random.SystemRandom()
    return ''.join(rng.choice(TEMPORARY_PASSWORD_CHARS) for _ in range(TEMPORARY_PASSWORD_LENGTH))


def _require_admin(actor):
    if actor is None:
        raise AccountServiceError('unauthenticated', 'User must be authenticated')
    if actor.role != Account.ROLE_ADMIN:
        raise AccountServiceError('permission-denied', 'Admin access required')


def _normalize_email(email):
    email = (email or '').strip().lower()
    if not is_valid_email(email):
        raise AccountServiceError('invalid-email', 'Invalid email address')
    if get_user_model().objects.filter(email__iexact=email).exists():
        raise AccountServiceError('email-already-in-use', 'This email address is already registered')
    return email


def _check_password(password, user=None):
    try:
        validate_password(password, user=user)
    except ValidationError as e:
        raise AccountServiceError('weak-password', ' '.join(e.messages))


def _personal_fields(personal):
    personal = personal or {}
    return {
        'full_name': (personal.get('name') or '').strip(),
        'phone': (personal.get('phone') or '').strip(),
        'dob': (personal.get('dob') or '').strip(),
    }


def _educational_fields(educational):
    educational = educational or {}
    return {
        'institution': (educational.get('institution') or '').strip(),
        'course': (educational.get('course') or '').strip(),
        'year': str(educational.get('year') or '').strip(),
    }


def _allocate(role, allocator):
    allocator = allocator or IdentifierAllocator()
    return allocator.allocate(role).unwrap()


def _log_activity(actor, action, resource_type, resource_id, changes=None, description=''):
    return ActivityLog.objects.create(
        actor=actor,
        actor_name=actor.full_name if actor else '',
        actor_role=actor.role if actor else '',
        action=action,
        resource_type=resource_type,
        resource_id=str(resource_id),
        changes=changes or [],
        description=description,
    )


def _create_account(email, password, role, custom_id, fields, is_first_login=True):
    User = get_user_model()
    user = User(username=email, email=email, is_staff=(role == Account.ROLE_ADMIN))
    if password:
        user.set_password(password)
    else:
        user.set_unusable_password()
    user.save()
    return Account.objects.create(
        user=user,
        role=role,
        custom_id=custom_id,
        is_first_login=is_first_login,
        **fields,
    )


def register_participant(email, password, personal, educational=None, allocator=None):
    """
    Self sign-up. Creates the login and a participant account with a PRIXT ID.
    """
    fields = {**_personal_fields(personal), **_educational_fields(educational)}
    if not email or not password or not fields['full_name']:
        raise AccountServiceError('missing-fields', 'Missing required fields')

    email = _normalize_email(email)
    _check_password(password)

    with transaction.atomic():
        custom_id = _allocate(Account.ROLE_PARTICIPANT, allocator)
        account = _create_account(email, password, Account.ROLE_PARTICIPANT, custom_id, fields)

    logger.info(f"Registered participant {account.custom_id} ({email})")
    return account


def create_member(actor, email, personal, allocator=None, rng=None, notify=True):
    """
    Admin-only: create a member with a temporary password.
    Returns (account, temporary_password).
    """
    _require_admin(actor)
    fields = _personal_fields(personal)
    if not email or not fields['full_name']:
        raise AccountServiceError('invalid-argument', 'Email and personal details are required')

    email = _normalize_email(email)
    temporary_password = generate_temporary_password(rng)

    with transaction.atomic():
        custom_id = _allocate(Account.ROLE_MEMBER, allocator)
        account = _create_account(email, temporary_password, Account.ROLE_MEMBER, custom_id, fields)
        _log_activity(
            actor, 'create', 'user', account.pk,
            description=f"Created member {account.full_name} ({custom_id})",
        )

    logger.info(f"Admin {actor.custom_id} created member {custom_id} ({email})")
    if notify:
        send_temporary_password_email(account, temporary_password)
    return account, temporary_password


def create_admin(email, password, personal, allocator=None, custom_id=None, is_first_login=False):
    """
    Bootstrap an admin account. `custom_id` may pin a fixed LIXT ID
    (the seeded admin uses LIXT-0000); otherwise one is allocated.
    """
    fields = _personal_fields(personal)
    if not email or not password or not fields['full_name']:
        raise AccountServiceError('missing-fields', 'Missing required fields')
    if custom_id is not None and not is_valid_identifier(custom_id, Account.ROLE_ADMIN):
        raise AccountServiceError('invalid-argument', f'Invalid admin ID: {custom_id}')

    email = _normalize_email(email)
    _check_password(password)
    fields.update({
        'institution': 'INFI X TECH',
        'course': 'Administration',
        'year': str(timezone.now().year),
    })

    with transaction.atomic():
        if custom_id is None:
            custom_id = _allocate(Account.ROLE_ADMIN, allocator)
        elif AccountIdentifierStore().identifier_exists(custom_id):
            raise AccountServiceError('already-exists', f'ID {custom_id} is already assigned')
        account = _create_account(
            email, password, Account.ROLE_ADMIN, custom_id, fields, is_first_login=is_first_login
        )

    logger.info(f"Created admin {account.custom_id} ({email})")
    return account


def change_role(actor, account, new_role, allocator=None, notify=True):
    """
    Admin-only: move `account` to `new_role` and give it a fresh ID with the
    new prefix. The old ID is not kept and may be handed out again later.
    """
    _require_admin(actor)
    if new_role not in ROLE_PREFIXES:
        raise AccountServiceError('invalid-argument', f'Invalid role specified: {new_role}')
    if new_role == account.role:
        raise AccountServiceError('invalid-argument', f'{account.full_name} is already a {new_role}')

    old_role, old_custom_id = account.role, account.custom_id

    with transaction.atomic():
        new_custom_id = _allocate(new_role, allocator)
        account.role = new_role
        account.custom_id = new_custom_id
        account.save(update_fields=['role', 'custom_id', 'updated_at'])
        account.user.is_staff = new_role == Account.ROLE_ADMIN
        account.user.save(update_fields=['is_staff'])
        _log_activity(
            actor, 'update', 'user', account.pk,
            changes=[
                {'field': 'role', 'old_value': old_role, 'new_value': new_role},
                {'field': 'custom_id', 'old_value': old_custom_id, 'new_value': new_custom_id},
            ],
            description=(
                f"Changed {account.full_name}'s role from {old_role} to {new_role} "
                f"and updated ID from {old_custom_id} to {new_custom_id}"
            ),
        )

    logger.info(f"Role change {old_custom_id} -> {new_custom_id} by {actor.custom_id}")
    if notify:
        send_identifier_changed_email(account, old_custom_id)
    return account


def delete_account(actor, account):
    """
    Admin-only: remove the login, the account and its event registrations.
    Returns the number of registrations removed.
    """
    _require_admin(actor)
    if account.pk == actor.pk:
        raise AccountServiceError('invalid-argument', 'You cannot delete your own account')

    account_pk, custom_id, name = account.pk, account.custom_id, account.full_name
    with transaction.atomic():
        removed, _ = EventRegistration.objects.filter(participant=account).delete()
        # Deleting the auth user cascades to the account
        account.user.delete()
        _log_activity(
            actor, 'delete', 'user', account_pk,
            description=f"Deleted {name} ({custom_id}) and {removed} registration(s)",
        )

    logger.info(f"Deleted account {custom_id} and {removed} registration(s)")
    return removed


def record_login(account):
    account.last_login_at = timezone.now()
    account.save(update_fields=['last_login_at', 'updated_at'])


def complete_first_login(account, new_password):
    """
    Replace the (temporary) password and clear the first-login flag.
    """
    user = account.user
    _check_password(new_password, user=user)
    user.set_password(new_password)
    user.save(update_fields=['password'])
    account.is_first_login = False
    account.save(update_fields=['is_first_login', 'updated_at'])
    logger.info(f"Password changed for {account.custom_id}; first login completed")
    return account


def update_profile(account, **changes):
    unknown = set(changes) - PROFILE_FIELDS
    if unknown:
        raise AccountServiceError(
            'invalid-argument', f"Field(s) cannot be updated: {', '.join(sorted(unknown))}"
        )
    for field, value in changes.items():
        setattr(account, field, value)
    account.save(update_fields=[*changes, 'updated_at'])
    return account


def check_event_eligibility(account, event):
    """
    Participants may apply to events that have not finished yet.
    """
    if account is None:
        raise AccountServiceError('unauthenticated', 'User must be authenticated')
    if account.role != Account.ROLE_PARTICIPANT:
        raise AccountServiceError('permission-denied', 'Only participants can register for events')
    if event.status == 'completed':
        raise AccountServiceError('not-eligible', f'{event.event_name} has already ended')


def _clean_team_members(team_members):
    members = []
    for member in team_members or []:
        if not isinstance(member, dict):
            continue
        name = str(member.get('name') or '').strip()
        email = str(member.get('email') or '').strip().lower()
        if name and email:
            members.append({'name': name, 'email': email})
    return members


def register_for_event(account, event, team_name='', team_members=None):
    """
    Apply to an event, alone or as a team. Free events need no payment;
    paid ones start as pending.
    """
    check_event_eligibility(account, event)

    with transaction.atomic():
        # Lock the event row so two submissions by the same participant serialize
        Event.objects.select_for_update().filter(pk=event.pk).first()
        if EventRegistration.objects.filter(event=event, participant=account).exists():
            raise AccountServiceError(
                'already-registered', f'You are already registered for {event.event_name}'
            )
        registration = EventRegistration.objects.create(
            event=event,
            participant=account,
            team_name=(team_name or '').strip(),
            team_members=_clean_team_members(team_members),
            payment_status='not-required' if event.fees == 0 else 'pending',
        )

    logger.info(
        f"{account.custom_id} registered for event {event.pk} "
        f"(payment {registration.payment_status})"
    )
    return registration


def export_event_registrations(actor, event):
    """
    Admin-only: registration rows for one event, with participant details
    filled in ('N/A' where unknown).
    """
    _require_admin(actor)
    registrations = (
        EventRegistration.objects.filter(event=event)
        .select_related('participant__user')
        .order_by('registration_date', 'pk')
    )
    rows = []
    for reg in registrations:
        participant = reg.participant
        rows.append({
            'registration_id': reg.pk,
            'participant_id': participant.custom_id,
            'participant_name': participant.full_name or 'N/A',
            'participant_email': participant.email or 'N/A',
            'participant_phone': participant.phone or 'N/A',
            'institution': participant.institution or 'N/A',
            'team_name': reg.team_name or 'Individual',
            'team_members': reg.team_members or [],
            'payment_status': reg.payment_status,
            'registration_date': reg.registration_date.isoformat() if reg.registration_date else None,
        })
    return {
        'event_name': event.event_name,
        'total_registrations': len(rows),
        'registrations': rows,
    }
