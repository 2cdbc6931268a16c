"""
Management command to record submissions for deadlines that have passed.
Run it periodically (e.g. from cron) when the task backend cannot defer tasks.
"""
from django.core.management.base import BaseCommand
from django.utils import timezone

from assignments.models import Deadline
from assignments.tasks import record_deadline_submissions


class Command(BaseCommand):
    help = 'Enqueue submission recording for every passed, unprocessed deadline'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='List due deadlines without enqueueing anything',
        )

    def handle(self, *args, **options):
        due = Deadline.objects.filter(
            deadline_at__lte=timezone.now(),
            processed_at__isnull=True,
            assignment__isnull=False,
            assignment__deleted_at__isnull=True,
        ).select_related('assignment')

        total = due.count()
        self.stdout.write(f'Found {total} due deadlines...')

        for deadline in due:
            self.stdout.write(f'  {deadline.assignment.title}: {deadline}')
            if not options['dry_run']:
                record_deadline_submissions.enqueue(deadline.pk)

        if options['dry_run']:
            self.stdout.write(self.style.WARNING('Dry run, nothing enqueued'))
        else:
            self.stdout.write(self.style.SUCCESS(f'Enqueued {total} deadlines'))
