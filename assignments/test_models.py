from datetime import timedelta

from django.test import TestCase
from django.contrib.auth.models import User
from django.core.exceptions import ValidationError
from django.utils import timezone
from apps.organizations.models import Organization
from assignments.deadlines import InvalidDeadlineError, build_from_string, format_deadline, parse_deadline
from assignments.models import Assignment, AssignmentRepo, Deadline
from unittest.mock import Mock, patch


class AssignmentModelTestCase(TestCase):
    """Tests for Assignment validation and soft delete"""

    def setUp(self):
        self.organization = Organization.objects.create(title='CS 101', slug='cs-101')
        self.assignment = Assignment.objects.create(
            organization=self.organization, title='Linked Lists', slug='linked-lists'
        )

    def test_clean_generates_slug_from_title(self):
        assignment = Assignment(organization=self.organization, title='Hash Maps 2')
        assignment.full_clean(exclude=['deadline'])
        self.assertEqual(assignment.slug, 'hash-maps-2')

    def test_title_unique_within_organization(self):
        """Test titles are compared case-insensitively"""
        duplicate = Assignment(organization=self.organization, title='LINKED LISTS', slug='other')
        with self.assertRaises(ValidationError) as cm:
            duplicate.full_clean(exclude=['deadline'])
        self.assertIn('title', cm.exception.message_dict)

    def test_slug_unique_within_organization(self):
        duplicate = Assignment(organization=self.organization, title='Other', slug='linked-lists')
        with self.assertRaises(ValidationError) as cm:
            duplicate.full_clean(exclude=['deadline'])
        self.assertIn('slug', cm.exception.message_dict)

    def test_reserved_slug_rejected(self):
        assignment = Assignment(organization=self.organization, title='New')
        with self.assertRaises(ValidationError) as cm:
            assignment.full_clean(exclude=['deadline'])
        self.assertIn('slug', cm.exception.message_dict)

    def test_title_without_slug_characters_rejected(self):
        """Test a slug is required even when the title slugifies to nothing"""
        assignment = Assignment(organization=self.organization, title='!!!')
        with self.assertRaises(ValidationError) as cm:
            assignment.full_clean(exclude=['deadline'])
        self.assertIn('slug', cm.exception.message_dict)
        self.assertEqual(assignment.slug, '')

    def test_same_title_in_other_organization(self):
        other_organization = Organization.objects.create(title='CS 102', slug='cs-102')
        assignment = Assignment(organization=other_organization, title='Linked Lists')
        assignment.full_clean(exclude=['deadline'])

    def test_deleted_assignment_frees_title(self):
        self.assignment.soft_delete()
        assignment = Assignment(organization=self.organization, title='Linked Lists')
        assignment.full_clean(exclude=['deadline'])

    def test_soft_delete_hides_assignment(self):
        self.assertTrue(self.assignment.soft_delete())
        self.assertTrue(self.assignment.is_deleted)
        self.assertFalse(Assignment.objects.filter(pk=self.assignment.pk).exists())
        self.assertTrue(Assignment.all_objects.filter(pk=self.assignment.pk).exists())

    def test_soft_delete_twice(self):
        """Test the second delete reports failure"""
        self.assertTrue(self.assignment.soft_delete())
        self.assertFalse(self.assignment.soft_delete())

    def test_users_are_distinct(self):
        student = User.objects.create_user(username='student', password='pass')
        AssignmentRepo.objects.create(assignment=self.assignment, user=student, github_repo_id=1)
        self.assertEqual(list(self.assignment.users()), [student])

    def test_create_assignment_invitation(self):
        invitation = self.assignment.create_assignment_invitation()
        self.assertEqual(len(invitation.key), 32)
        self.assertEqual(len(invitation.short_key), 8)


class DeadlineModelTestCase(TestCase):
    """Tests for Deadline validation and job scheduling"""

    def test_clean_rejects_past_deadline(self):
        deadline = Deadline(deadline_at=timezone.now() - timedelta(minutes=1))
        with self.assertRaises(ValidationError):
            deadline.full_clean()

    def test_clean_accepts_future_deadline(self):
        Deadline(deadline_at=timezone.now() + timedelta(days=1)).full_clean()

    @patch('assignments.tasks.record_deadline_submissions')
    @patch('django.tasks.default_task_backend', Mock(supports_defer=True))
    def test_create_job_defers_when_supported(self, mock_task):
        deadline = Deadline.objects.create(deadline_at=timezone.now() + timedelta(days=1))
        deadline.create_job()
        mock_task.using.assert_called_once_with(run_after=deadline.deadline_at)
        mock_task.using.return_value.enqueue.assert_called_once_with(deadline.pk)

    @patch('assignments.tasks.record_deadline_submissions')
    @patch('django.tasks.default_task_backend', Mock(supports_defer=False))
    def test_create_job_leaves_future_deadline_for_command(self, mock_task):
        deadline = Deadline.objects.create(deadline_at=timezone.now() + timedelta(days=1))
        with self.assertLogs('assignments.models', level='INFO'):
            self.assertIsNone(deadline.create_job())
        mock_task.enqueue.assert_not_called()

    @patch('assignments.tasks.record_deadline_submissions')
    @patch('django.tasks.default_task_backend', Mock(supports_defer=False))
    def test_create_job_runs_passed_deadline(self, mock_task):
        deadline = Deadline.objects.create(deadline_at=timezone.now() - timedelta(minutes=5))
        deadline.create_job()
        mock_task.enqueue.assert_called_once_with(deadline.pk)


class DeadlineParsingTestCase(TestCase):
    """Tests for turning form input into deadlines"""

    def test_parse_form_format(self):
        parsed = parse_deadline('10/31/2030 17:00')
        self.assertTrue(timezone.is_aware(parsed))
        self.assertEqual((parsed.year, parsed.month, parsed.day, parsed.hour), (2030, 10, 31, 17))

    def test_parse_iso_with_offset(self):
        parsed = parse_deadline('2030-10-31T17:00:00+02:00')
        self.assertEqual(parsed.utcoffset(), timedelta(hours=2))

    def test_parse_invalid(self):
        for value in ['', '   ', 'not a date', '13/45/2030']:
            with self.assertRaises(InvalidDeadlineError):
                parse_deadline(value)

    def test_build_from_string_is_unsaved(self):
        deadline = build_from_string('10/31/2030 17:00')
        self.assertIsNone(deadline.pk)

    def test_format_deadline(self):
        self.assertEqual(format_deadline(None), '')
        deadline = build_from_string('10/31/2030 17:00')
        self.assertEqual(format_deadline(deadline), '10/31/2030 17:00')
