"""
Database models for portal accounts, events and event registrations.
"""
from django.conf import settings
from django.db import models


class Account(models.Model):
    """
    Portal profile attached to a Django auth user.
    Carries the role and the human-readable custom ID (e.g. PRIXT-4821).
    """
    ROLE_PARTICIPANT = 'participant'
    ROLE_MEMBER = 'member'
    ROLE_MANAGER = 'manager'
    ROLE_ADMIN = 'admin'

    ROLE_CHOICES = [
        (ROLE_PARTICIPANT, 'Participant'),
        (ROLE_MEMBER, 'Member'),
        (ROLE_MANAGER, 'Manager'),
        (ROLE_ADMIN, 'Admin'),
    ]

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='account'
    )
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_PARTICIPANT)

    # Uniqueness is checked at allocation time, not by the database
    custom_id = models.CharField(
        max_length=20, db_index=True,
        help_text="Role-scoped ID e.g. MIXT-1042 (prefix + 4 digits)"
    )

    # Personal details
    full_name = models.CharField(max_length=200)
    phone = models.CharField(max_length=20, blank=True, default='')
    dob = models.CharField(max_length=20, blank=True, default='')
    bio = models.TextField(blank=True, default='')

    # Educational details
    institution = models.CharField(max_length=200, blank=True, default='')
    course = models.CharField(max_length=200, blank=True, default='')
    year = models.CharField(max_length=20, blank=True, default='')

    is_first_login = models.BooleanField(
        default=True, help_text="Must change password before using the dashboard"
    )
    is_active = models.BooleanField(default=True)
    profile_photo_url = models.URLField(blank=True, default='')
    social_links = models.JSONField(default=dict, blank=True)

    last_login_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Account'
        verbose_name_plural = 'Accounts'

    def __str__(self):
        return f"{self.full_name} ({self.custom_id}) - {self.get_role_display()}"

    @property
    def email(self):
        return self.user.email

    @property
    def is_admin(self):
        return self.role == self.ROLE_ADMIN


class Event(models.Model):
    STATUS_CHOICES = [
        ('upcoming', 'Upcoming'),
        ('active', 'Active'),
        ('completed', 'Completed'),
    ]

    event_name = models.CharField(max_length=200)
    description = models.TextField(blank=True, default='')
    eligibility = models.JSONField(default=list, blank=True)
    fees = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='upcoming')
    requirements = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-start_date']
        verbose_name = 'Event'
        verbose_name_plural = 'Events'

    def __str__(self):
        return f"{self.event_name} ({self.get_status_display()})"


class EventRegistration(models.Model):
    """
    A participant's (or team's) registration for an event.
    """
    PAYMENT_STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('completed', 'Completed'),
        ('not-required', 'Not Required'),
    ]

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name='registrations')
    participant = models.ForeignKey(Account, on_delete=models.CASCADE, related_name='registrations')
    team_name = models.CharField(max_length=200, blank=True, default='')
    team_members = models.JSONField(default=list, blank=True, help_text="List of {name, email}")
    payment_status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, default='pending')
    registration_date = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-registration_date']
        verbose_name = 'Event Registration'
        verbose_name_plural = 'Event Registrations'

    def __str__(self):
        return f"{self.participant.full_name} - {self.event.event_name} - {self.payment_status}"


class ActivityLog(models.Model):
    """
    Audit trail of admin actions (role changes, account creation, deletion).
    """
    ACTION_CHOICES = [
        ('create', 'Create'),
        ('update', 'Update'),
        ('delete', 'Delete'),
        ('publish', 'Publish'),
        ('unpublish', 'Unpublish'),
    ]
    RESOURCE_CHOICES = [
        ('event', 'Event'),
        ('update', 'Update'),
        ('user', 'User'),
        ('registration', 'Registration'),
        ('profile', 'Profile'),
    ]

    actor = models.ForeignKey(
        Account, on_delete=models.SET_NULL, null=True, blank=True, related_name='activity'
    )
    actor_name = models.CharField(max_length=200, blank=True, default='')
    actor_role = models.CharField(max_length=20, blank=True, default='')
    action = models.CharField(max_length=10, choices=ACTION_CHOICES)
    resource_type = models.CharField(max_length=20, choices=RESOURCE_CHOICES)
    resource_id = models.CharField(max_length=64)
    changes = models.JSONField(default=list, blank=True, help_text="List of {field, old_value, new_value}")
    description = models.TextField(blank=True, default='')
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-timestamp']
        verbose_name = 'Activity Log'
        verbose_name_plural = 'Activity Logs'

    def __str__(self):
        return f"{self.actor_name or 'system'} {self.action} {self.resource_type} {self.resource_id}"
