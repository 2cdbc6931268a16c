from django.test import TestCase
from django.contrib.auth.models import User
from django.urls import reverse
from apps.organizations.models import LtiConfiguration, Organization, Roster, RosterEntry
from assignments.models import Assignment, AssignmentRepo


class RosterEntryOrderingTestCase(TestCase):
    """Tests for roster entry grouping and sort modes on the assignment page"""

    def setUp(self):
        self.roster = Roster.objects.create(identifier_name='Emails')
        self.organization = Organization.objects.create(title='CS 101', slug='cs-101', roster=self.roster)
        self.assignment = Assignment.objects.create(organization=self.organization, title='HW 1', slug='hw-1')

        self.accepted_user = User.objects.create_user(username='accepted', password='pass')
        self.linked_user = User.objects.create_user(username='linked', password='pass')

        self.unlinked = RosterEntry.objects.create(roster=self.roster, identifier='a@example.com')
        self.linked = RosterEntry.objects.create(roster=self.roster, identifier='b@example.com', user=self.linked_user)
        self.accepted = RosterEntry.objects.create(roster=self.roster, identifier='c@example.com', user=self.accepted_user)

        AssignmentRepo.objects.create(assignment=self.assignment, user=self.accepted_user, github_repo_id=1)

    def test_order_for_view_groups_entries(self):
        """Test accepted first, then linked, then unlinked"""
        entries = list(self.roster.roster_entries.order_for_view(self.assignment))
        self.assertEqual(entries, [self.accepted, self.linked, self.unlinked])

    def test_sort_mode_applies_within_groups(self):
        other_unlinked = RosterEntry.objects.create(roster=self.roster, identifier='0@example.com')
        entries = list(
            self.roster.roster_entries.order_by_sort_mode('Student identifier', assignment=self.assignment)
        )
        self.assertEqual(entries, [self.accepted, self.linked, other_unlinked, self.unlinked])

    def test_repo_for_other_assignment_does_not_count(self):
        other = Assignment.objects.create(organization=self.organization, title='HW 2', slug='hw-2')
        entries = list(self.roster.roster_entries.order_for_view(other))
        self.assertEqual(entries[-1], self.unlinked)
        self.assertCountEqual(entries[:2], [self.accepted, self.linked])

    def test_filter_by_search(self):
        entries = self.roster.roster_entries.filter_by_search('B@EXAMPLE')
        self.assertEqual(list(entries), [self.linked])

    def test_blank_search_matches_all(self):
        self.assertEqual(self.roster.roster_entries.filter_by_search('  ').count(), 3)


class OrganizationModelTestCase(TestCase):

    def test_get_lti_configuration(self):
        organization = Organization.objects.create(title='CS 101', slug='cs-101')
        self.assertIsNone(organization.get_lti_configuration())

        configuration = LtiConfiguration.objects.create(
            organization=organization, consumer_key='key', shared_secret='secret'
        )
        organization = Organization.objects.get(pk=organization.pk)
        self.assertEqual(organization.get_lti_configuration(), configuration)


class OrganizationViewsTestCase(TestCase):
    """Tests for organization list and detail pages"""

    def setUp(self):
        self.teacher = User.objects.create_user(username='teacher', password='pass')
        self.organization = Organization.objects.create(title='CS 101', slug='cs-101')
        self.organization.users.add(self.teacher)
        Organization.objects.create(title='Other', slug='other')
        self.client.login(username='teacher', password='pass')

    def test_list_shows_only_member_organizations(self):
        response = self.client.get(reverse('organizations:list'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(list(response.context['organizations']), [self.organization])

    def test_detail_hides_deleted_assignments(self):
        kept = Assignment.objects.create(organization=self.organization, title='Kept', slug='kept')
        gone = Assignment.objects.create(organization=self.organization, title='Gone', slug='gone')
        gone.soft_delete()

        response = self.client.get(self.organization.get_absolute_url())
        self.assertEqual(response.status_code, 200)
        self.assertEqual(list(response.context['assignments']), [kept])

    def test_detail_404_for_non_member(self):
        response = self.client.get(reverse('organizations:detail', kwargs={'organization_slug': 'other'}))
        self.assertEqual(response.status_code, 404)
