"""
Management command to find accounts sharing a custom ID or holding a malformed one.

IDs are checked for uniqueness when allocated but the check and the write are
not atomic, so concurrent sign-ups can end up with the same ID. With --fix,
every holder of a duplicate except the oldest account gets a freshly allocated
ID, and malformed IDs are replaced.

Run: python manage.py audit_identifiers
Use --fix to reassign, --dry-run with --fix to only print what would change.
"""
from django.core.management.base import BaseCommand
from django.db import transaction
from django.db.models import Count

from accounts.exceptions import IdentifierError
from accounts.identifiers import AccountIdentifierStore, IdentifierAllocator, is_valid_identifier
from accounts.models import Account


class RunScopedStore(AccountIdentifierStore):
    """Treats IDs already handed out in this run as taken, even when nothing was saved."""

    def __init__(self):
        self.handed_out = set()

    def identifier_exists(self, candidate):
        return candidate in self.handed_out or super().identifier_exists(candidate)


class Command(BaseCommand):
    help = 'Report (and optionally reassign) duplicate or malformed account IDs'

    def add_arguments(self, parser):
        parser.add_argument(
            '--fix',
            action='store_true',
            help='Reassign IDs for duplicates and malformed values.',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='With --fix, only show what would be updated, do not save.',
        )

    def get_allocator(self, store):
        return IdentifierAllocator(store=store)

    def handle(self, *args, **options):
        fix = options['fix']
        dry_run = options['dry_run']
        if fix and dry_run:
            self.stdout.write(self.style.WARNING('Dry run: no changes will be saved.'))

        to_reassign = []

        duplicate_ids = (
            Account.objects.values('custom_id')
            .annotate(holders=Count('id'))
            .filter(holders__gt=1)
            .values_list('custom_id', flat=True)
        )
        duplicates = 0
        for custom_id in duplicate_ids:
            holders = list(Account.objects.filter(custom_id=custom_id).order_by('created_at', 'id'))
            duplicates += 1
            self.stdout.write(self.style.WARNING(
                f'  Duplicate {custom_id}: ' + ', '.join(a.full_name for a in holders)
            ))
            to_reassign.extend(holders[1:])

        malformed = 0
        for account in Account.objects.order_by('created_at'):
            if not is_valid_identifier(account.custom_id, account.role):
                malformed += 1
                self.stdout.write(self.style.WARNING(
                    f'  Malformed ID for {account.get_role_display()} {account.full_name}: "{account.custom_id}"'
                ))
                if account not in to_reassign:
                    to_reassign.append(account)

        self.stdout.write(f'Duplicated IDs: {duplicates}, malformed IDs: {malformed}')
        if not fix or not to_reassign:
            return

        store = RunScopedStore()
        allocator = self.get_allocator(store)
        updated = 0
        failed = 0
        for account in to_reassign:
            try:
                new_id = allocator.allocate(account.role).unwrap()
            except IdentifierError as e:
                failed += 1
                self.stdout.write(self.style.ERROR(f'  Could not reassign {account.full_name}: {e}'))
                continue
            store.handed_out.add(new_id)
            current = account.custom_id
            if not dry_run:
                with transaction.atomic():
                    account.custom_id = new_id
                    account.save(update_fields=['custom_id', 'updated_at'])
            updated += 1
            self.stdout.write(f'  {account.full_name}: "{current}" -> "{new_id}"')

        self.stdout.write('')
        self.stdout.write(self.style.SUCCESS(f'Done. Reassigned: {updated}, failed: {failed}'))
        if dry_run and updated:
            self.stdout.write(self.style.WARNING('Run without --dry-run to apply changes.'))
