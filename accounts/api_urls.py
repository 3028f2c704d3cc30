"""
API URL patterns for the accounts app.
"""
from django.urls import path
from . import views

urlpatterns = [
    path('identifiers/generate/', views.generate_identifier, name='generate_identifier'),
    path('participants/register/', views.register_participant, name='register_participant'),
    path('account/login/', views.login, name='account_login'),
    path('account/logout/', views.logout, name='account_logout'),
    path('account/redirect/', views.redirect_decision, name='account_redirect'),
    path('account/change-password/', views.change_password, name='change_password'),
    path('members/', views.create_member, name='create_member'),
    path('users/<int:account_id>/role/', views.change_role, name='change_role'),
    path('users/<int:account_id>/delete/', views.delete_user, name='delete_user'),
    path('events/<int:event_id>/registrations/', views.event_registrations, name='event_registrations'),
    path('events/<int:event_id>/register/', views.register_for_event, name='register_for_event'),
]
