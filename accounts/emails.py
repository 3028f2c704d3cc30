"""
Email sending functions for account creation and ID changes.
"""
from django.core.mail import send_mail
from django.template.loader import render_to_string
from django.conf import settings
from django.utils.html import strip_tags
import logging

logger = logging.getLogger(__name__)


def _send(subject, template, context, recipient):
    context = {
        'support_email': getattr(settings, 'SUPPORT_EMAIL', 'support@infixttech.com'),
        'site_url': getattr(settings, 'SITE_URL', 'https://infixttech.com'),
        **context,
    }
    html_message = render_to_string(template, context)
    plain_message = strip_tags(html_message)
    send_mail(
        subject=subject,
        message=plain_message,
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[recipient],
        html_message=html_message,
        fail_silently=False,
    )


def send_temporary_password_email(account, temporary_password):
    """
    Send a newly created member their ID and temporary password.
    They are asked to change it on first login.

    Returns True if the email was sent.
    """
    try:
        _send(
            'Your INFI X TECH member account',
            'accounts/emails/temporary_password.html',
            {
                'account': account,
                'temporary_password': temporary_password,
                'login_url': f"{getattr(settings, 'SITE_URL', '')}/login",
            },
            account.email,
        )
        logger.info(f"Temporary password email sent to {account.email} ({account.custom_id})")
        return True
    except Exception as e:
        # Account creation already succeeded; the admin still sees the password
        logger.error(f"Failed to send temporary password email: {str(e)}")
        return False


def send_identifier_changed_email(account, old_custom_id):
    """
    Tell the account holder their role and ID changed.
    """
    try:
        _send(
            f'Your new INFI X TECH ID: {account.custom_id}',
            'accounts/emails/identifier_changed.html',
            {
                'account': account,
                'old_custom_id': old_custom_id,
            },
            account.email,
        )
        logger.info(f"ID change email sent to {account.email} ({old_custom_id} -> {account.custom_id})")
        return True
    except Exception as e:
        logger.error(f"Failed to send ID change email: {str(e)}")
        return False
