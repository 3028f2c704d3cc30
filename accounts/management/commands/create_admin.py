"""
Management command to create the first admin account.
Run this after migrations: python manage.py create_admin --email admin@example.com --name "Admin User"
"""
from getpass import getpass

from django.core.management.base import BaseCommand, CommandError

from accounts.exceptions import AccountServiceError, IdentifierError
from accounts.services import create_admin


class Command(BaseCommand):
    help = 'Creates an admin account (LIXT ID) for initial setup'

    def add_arguments(self, parser):
        parser.add_argument('--email', required=True)
        parser.add_argument('--name', required=True)
        parser.add_argument('--password', help='Prompted for when omitted.')
        parser.add_argument('--phone', default='')
        parser.add_argument(
            '--custom-id',
            help='Fixed admin ID such as LIXT-0000. Allocated when omitted.',
        )

    def handle(self, *args, **options):
        password = options['password'] or getpass('Admin password: ')
        self.stdout.write('Creating admin account...')
        try:
            account = create_admin(
                options['email'],
                password,
                {'name': options['name'], 'phone': options['phone']},
                custom_id=options['custom_id'],
            )
        except AccountServiceError as e:
            raise CommandError(e.message)
        except IdentifierError as e:
            raise CommandError(str(e))

        self.stdout.write(self.style.SUCCESS(
            f'✓ Created admin {account.full_name} ({account.custom_id}) <{account.email}>'
        ))
