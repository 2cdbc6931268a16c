from datetime import timedelta
from io import StringIO

from django.test import TestCase
from django.contrib.auth.models import User
from django.core.management import call_command
from django.utils import timezone
from apps.github.client import GitHubError
from apps.organizations.models import Organization
from assignments.models import Assignment, AssignmentRepo, Deadline
from assignments.tasks import destroy_resource, record_deadline_submissions, update_repository_visibility
from unittest.mock import patch


class AssignmentTaskTestCase(TestCase):

    def setUp(self):
        self.organization = Organization.objects.create(title='CS 101', slug='cs-101')
        self.deadline = Deadline.objects.create(deadline_at=timezone.now() - timedelta(minutes=5))
        self.assignment = Assignment.objects.create(
            organization=self.organization,
            title='Linked Lists',
            slug='linked-lists',
            deadline=self.deadline,
        )
        self.ada = User.objects.create_user(username='ada', password='pass')
        self.alan = User.objects.create_user(username='alan', password='pass')
        self.ada_repo = AssignmentRepo.objects.create(assignment=self.assignment, user=self.ada, github_repo_id=11)
        self.alan_repo = AssignmentRepo.objects.create(assignment=self.assignment, user=self.alan, github_repo_id=12)


class DestroyResourceTestCase(AssignmentTaskTestCase):
    """Tests for removing soft-deleted assignments"""

    def test_destroys_marked_assignment(self):
        self.assignment.soft_delete()

        self.assertTrue(destroy_resource.call(self.assignment.pk))
        self.assertFalse(Assignment.all_objects.filter(pk=self.assignment.pk).exists())
        self.assertFalse(AssignmentRepo.objects.filter(assignment_id=self.assignment.pk).exists())
        self.assertFalse(Deadline.objects.filter(pk=self.deadline.pk).exists())

    def test_keeps_unmarked_assignment(self):
        with self.assertLogs('assignments.tasks', level='WARNING'):
            self.assertFalse(destroy_resource.call(self.assignment.pk))
        self.assertTrue(Assignment.objects.filter(pk=self.assignment.pk).exists())

    def test_missing_assignment(self):
        self.assertFalse(destroy_resource.call(999999))


@patch('assignments.tasks.GitHubClient')
class RecordDeadlineSubmissionsTestCase(AssignmentTaskTestCase):
    """Tests for snapshotting student repos at the deadline"""

    def test_records_head_commits(self, mock_client_class):
        mock_client_class.return_value.branch_head_sha.side_effect = lambda repo_id: f'sha-{repo_id}'

        self.assertEqual(record_deadline_submissions.call(self.deadline.pk), 2)

        self.ada_repo.refresh_from_db()
        self.deadline.refresh_from_db()
        self.assertEqual(self.ada_repo.submission_sha, 'sha-11')
        self.assertIsNotNone(self.deadline.processed_at)

    def test_github_errors_skip_repo(self, mock_client_class):
        def head_sha(repo_id):
            if repo_id == 12:
                raise GitHubError('boom', status_code=500)
            return 'abc'
        mock_client_class.return_value.branch_head_sha.side_effect = head_sha

        with self.assertLogs('assignments.tasks', level='ERROR'):
            self.assertEqual(record_deadline_submissions.call(self.deadline.pk), 1)

        self.alan_repo.refresh_from_db()
        self.assertEqual(self.alan_repo.submission_sha, '')

    def test_processed_only_once(self, mock_client_class):
        self.deadline.processed_at = timezone.now()
        self.deadline.save()

        self.assertEqual(record_deadline_submissions.call(self.deadline.pk), 0)
        mock_client_class.assert_not_called()

    def test_future_deadline_skipped(self, mock_client_class):
        self.deadline.deadline_at = timezone.now() + timedelta(days=1)
        self.deadline.save()

        self.assertEqual(record_deadline_submissions.call(self.deadline.pk), 0)
        mock_client_class.assert_not_called()

    def test_deleted_assignment_skipped(self, mock_client_class):
        self.assignment.soft_delete()

        self.assertEqual(record_deadline_submissions.call(self.deadline.pk), 0)
        mock_client_class.assert_not_called()

    def test_missing_deadline(self, mock_client_class):
        self.assertEqual(record_deadline_submissions.call(999999), 0)


@patch('assignments.tasks.GitHubClient')
class UpdateRepositoryVisibilityTestCase(AssignmentTaskTestCase):

    def test_updates_every_repo(self, mock_client_class):
        failures = update_repository_visibility.call(self.assignment.pk, False)

        self.assertEqual(failures, 0)
        calls = mock_client_class.return_value.set_repository_visibility.call_args_list
        self.assertCountEqual([c.args[0] for c in calls], [11, 12])
        self.assertTrue(all(c.kwargs == {'public': False} for c in calls))

    def test_counts_failures(self, mock_client_class):
        mock_client_class.return_value.set_repository_visibility.side_effect = GitHubError('nope')
        with self.assertLogs('assignments.tasks', level='ERROR'):
            self.assertEqual(update_repository_visibility.call(self.assignment.pk, True), 2)


class ProcessDeadlinesCommandTestCase(AssignmentTaskTestCase):
    """Tests for the process_deadlines management command"""

    def setUp(self):
        super().setUp()
        future = Deadline.objects.create(deadline_at=timezone.now() + timedelta(days=1))
        Assignment.objects.create(organization=self.organization, title='Later', slug='later', deadline=future)

        processed = Deadline.objects.create(
            deadline_at=timezone.now() - timedelta(days=1), processed_at=timezone.now()
        )
        Assignment.objects.create(organization=self.organization, title='Done', slug='done', deadline=processed)

    @patch('assignments.management.commands.process_deadlines.record_deadline_submissions')
    def test_enqueues_due_deadlines(self, mock_task):
        out = StringIO()
        call_command('process_deadlines', stdout=out)

        mock_task.enqueue.assert_called_once_with(self.deadline.pk)
        self.assertIn('Enqueued 1 deadlines', out.getvalue())

    @patch('assignments.management.commands.process_deadlines.record_deadline_submissions')
    def test_skips_deleted_assignments(self, mock_task):
        self.assignment.soft_delete()
        call_command('process_deadlines', stdout=StringIO())
        mock_task.enqueue.assert_not_called()

    @patch('assignments.management.commands.process_deadlines.record_deadline_submissions')
    def test_dry_run(self, mock_task):
        out = StringIO()
        call_command('process_deadlines', '--dry-run', stdout=out)

        mock_task.enqueue.assert_not_called()
        self.assertIn('Found 1 due deadlines', out.getvalue())
