from datetime import timedelta

from django.test import TestCase
from django.utils import timezone
from apps.organizations.models import Organization
from assignments.deadlines import format_deadline
from assignments.editor import AssignmentEditor
from assignments.models import Assignment, Deadline
from unittest.mock import patch


def future_deadline_string(days=7):
    return (timezone.now() + timedelta(days=days)).strftime('%m/%d/%Y %H:%M')


@patch('assignments.models.Deadline.create_job')
class AssignmentEditorTestCase(TestCase):
    """Tests for applying edits to an assignment"""

    def setUp(self):
        self.organization = Organization.objects.create(title='CS 101', slug='cs-101')
        self.deadline = Deadline.objects.create(
            deadline_at=(timezone.now() + timedelta(days=3)).replace(second=0, microsecond=0)
        )
        self.assignment = Assignment.objects.create(
            organization=self.organization,
            title='Linked Lists',
            slug='linked-lists',
            deadline=self.deadline,
        )

    def perform(self, **options):
        return AssignmentEditor.perform(assignment=self.assignment, options=options)

    def test_updates_attributes(self, mock_create_job):
        result = self.perform(title='Linked Lists II', students_are_repo_admins=True)

        self.assertTrue(result.is_success)
        self.assertEqual(result.assignment, self.assignment)
        self.assignment.refresh_from_db()
        self.assertEqual(self.assignment.title, 'Linked Lists II')
        self.assertTrue(self.assignment.students_are_repo_admins)
        mock_create_job.assert_not_called()

    def test_missing_deadline_option_keeps_deadline(self, mock_create_job):
        self.perform(title='Renamed')
        self.assignment.refresh_from_db()
        self.assertEqual(self.assignment.deadline_id, self.deadline.pk)

    def test_blank_deadline_removes_it(self, mock_create_job):
        result = self.perform(deadline='')

        self.assertTrue(result.is_success)
        self.assignment.refresh_from_db()
        self.assertIsNone(self.assignment.deadline)
        self.assertFalse(Deadline.objects.filter(pk=self.deadline.pk).exists())

    def test_unchanged_deadline_is_noop(self, mock_create_job):
        result = self.perform(deadline=format_deadline(self.deadline))

        self.assertTrue(result.is_success)
        self.assignment.refresh_from_db()
        self.assertEqual(self.assignment.deadline_id, self.deadline.pk)
        mock_create_job.assert_not_called()

    def test_new_deadline_replaces_old(self, mock_create_job):
        result = self.perform(deadline=future_deadline_string(days=10))

        self.assertTrue(result.is_success)
        self.assignment.refresh_from_db()
        self.assertNotEqual(self.assignment.deadline_id, self.deadline.pk)
        self.assertFalse(Deadline.objects.filter(pk=self.deadline.pk).exists())
        mock_create_job.assert_called_once_with()

    def test_invalid_deadline_fails(self, mock_create_job):
        result = self.perform(deadline='whenever')

        self.assertTrue(result.is_failed)
        self.assertIn('is not a valid date', result.error)
        self.assignment.refresh_from_db()
        self.assertEqual(self.assignment.deadline_id, self.deadline.pk)

    def test_past_deadline_fails(self, mock_create_job):
        result = self.perform(deadline='01/01/2001 10:00')
        self.assertTrue(result.is_failed)
        self.assertEqual(result.error, 'Deadline must be in the future.')

    def test_duplicate_title_fails(self, mock_create_job):
        Assignment.objects.create(organization=self.organization, title='Graphs', slug='graphs')
        result = self.perform(title='graphs')

        self.assertTrue(result.is_failed)
        self.assertIn('already exists', result.error)
        self.assertEqual(Assignment.objects.get(pk=self.assignment.pk).title, 'Linked Lists')

    @patch('assignments.tasks.update_repository_visibility')
    def test_public_repo_change_updates_visibility(self, mock_task, mock_create_job):
        self.perform(public_repo=False)
        mock_task.enqueue.assert_called_once_with(self.assignment.pk, False)

    @patch('assignments.tasks.update_repository_visibility')
    def test_same_public_repo_leaves_visibility(self, mock_task, mock_create_job):
        self.perform(public_repo=True, title='Renamed')
        mock_task.enqueue.assert_not_called()
