"""
Django forms validating the JSON/form payloads of the account API.
"""
from django import forms
from .models import Account


class PersonalDetailsForm(forms.Form):
    email = forms.EmailField()
    name = forms.CharField(max_length=200)
    phone = forms.CharField(max_length=20, required=False)
    dob = forms.CharField(max_length=20, required=False)

    def personal_details(self):
        data = self.cleaned_data
        return {'name': data['name'], 'phone': data.get('phone', ''), 'dob': data.get('dob', '')}


class ParticipantSignupForm(PersonalDetailsForm):
    """
    Self registration form for participants.
    """
    password = forms.CharField(widget=forms.PasswordInput)
    institution = forms.CharField(max_length=200, required=False)
    course = forms.CharField(max_length=200, required=False)
    year = forms.CharField(max_length=20, required=False)

    def educational_details(self):
        data = self.cleaned_data
        return {
            'institution': data.get('institution', ''),
            'course': data.get('course', ''),
            'year': data.get('year', ''),
        }


class MemberCreateForm(PersonalDetailsForm):
    pass


class RoleForm(forms.Form):
    role = forms.ChoiceField(choices=Account.ROLE_CHOICES)


class ChangePasswordForm(forms.Form):
    new_password = forms.CharField(widget=forms.PasswordInput)
    confirm_password = forms.CharField(widget=forms.PasswordInput)

    def clean(self):
        cleaned_data = super().clean()
        if cleaned_data.get('new_password') != cleaned_data.get('confirm_password'):
            raise forms.ValidationError('Passwords do not match')
        return cleaned_data


class EventApplicationForm(forms.Form):
    team_name = forms.CharField(max_length=200, required=False)
    team_members = forms.JSONField(required=False)

    def clean_team_members(self):
        members = self.cleaned_data.get('team_members') or []
        if not isinstance(members, list):
            raise forms.ValidationError('Team members must be a list of {name, email}')
        return members


class LoginForm(forms.Form):
    email = forms.CharField(max_length=254)
    password = forms.CharField(widget=forms.PasswordInput)

    def clean_email(self):
        return self.cleaned_data['email'].strip().lower()
