"""
Django admin configuration for the accounts app.
"""
from django.contrib import admin
from .models import Account, ActivityLog, Event, EventRegistration


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    """
    Admin interface for portal accounts.
    Custom IDs are read-only here; use a role change to get a new one.
    """
    list_display = [
        'custom_id', 'full_name', 'email', 'role', 'is_first_login', 'is_active', 'created_at'
    ]
    list_filter = ['role', 'is_active', 'is_first_login', 'created_at']
    search_fields = ['custom_id', 'full_name', 'user__email', 'phone']
    readonly_fields = ['custom_id', 'role', 'created_at', 'updated_at', 'last_login_at']
    fieldsets = (
        ('Account', {
            'fields': ('user', 'custom_id', 'role', 'is_active', 'is_first_login')
        }),
        ('Personal Details', {
            'fields': ('full_name', 'phone', 'dob', 'bio', 'profile_photo_url', 'social_links')
        }),
        ('Educational Details', {
            'fields': ('institution', 'course', 'year'),
            'classes': ('collapse',)
        }),
        ('Timestamps', {
            'fields': ('last_login_at', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    @admin.display(description='Email', ordering='user__email')
    def email(self, obj):
        return obj.user.email


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ['event_name', 'status', 'fees', 'start_date', 'end_date']
    list_filter = ['status', 'start_date']
    search_fields = ['event_name']


@admin.register(EventRegistration)
class EventRegistrationAdmin(admin.ModelAdmin):
    list_display = ['participant', 'event', 'team_name', 'payment_status', 'registration_date']
    list_filter = ['payment_status', 'event']
    search_fields = ['participant__full_name', 'participant__custom_id', 'team_name']


@admin.register(ActivityLog)
class ActivityLogAdmin(admin.ModelAdmin):
    list_display = ['timestamp', 'actor_name', 'action', 'resource_type', 'resource_id']
    list_filter = ['action', 'resource_type']
    search_fields = ['actor_name', 'description', 'resource_id']
    readonly_fields = [f.name for f in ActivityLog._meta.fields]
