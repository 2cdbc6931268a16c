from django.test import TestCase, RequestFactory, override_settings
from django.contrib.auth.models import User
from django.http import Http404
from django.views.generic import TemplateView
from apps.core import stats
from apps.core.features import feature_enabled, search_assignments_enabled
from apps.core.mixins import OrganizationAuthorizationMixin
from apps.core.responses import HttpResponseAppSchemeRedirect
from apps.core.views import SearchableListViewMixin, wants_partial
from apps.organizations.models import Organization
from unittest.mock import Mock, patch


class FeatureFlagsTestCase(TestCase):
    """Tests for global and per-user feature flags"""

    def setUp(self):
        self.user = User.objects.create_user(username='teacher', password='pass')

    @override_settings(FEATURE_FLAGS=['search_assignments'])
    def test_global_flag_enabled_for_everyone(self):
        """Test a flag listed in settings is on without a user"""
        self.assertTrue(feature_enabled('search_assignments'))
        self.assertTrue(search_assignments_enabled(self.user))

    @override_settings(FEATURE_FLAGS=[])
    def test_flag_off_without_user(self):
        """Test a flag not in settings is off for anonymous checks"""
        self.assertFalse(search_assignments_enabled())

    @override_settings(FEATURE_FLAGS=[])
    def test_flag_enabled_for_single_user(self):
        """Test per-user opt in through the profile"""
        other = User.objects.create_user(username='other', password='pass')
        self.user.profile.feature_flags = ['search_assignments']
        self.user.profile.save()

        self.assertTrue(search_assignments_enabled(self.user))
        self.assertFalse(search_assignments_enabled(other))


class StatsTestCase(TestCase):
    """Tests for the StatsD helpers"""

    def tearDown(self):
        stats.reset_client()

    @patch('apps.core.stats.StatsClient')
    def test_client_built_once_from_settings(self, mock_client_class):
        """Test the client is created lazily and reused"""
        with override_settings(STATSD_HOST='stats.local', STATSD_PORT=9125, STATSD_PREFIX='test'):
            stats.reset_client()
            first = stats.statsd()
            second = stats.statsd()

        self.assertIs(first, second)
        mock_client_class.assert_called_once_with(host='stats.local', port=9125, prefix='test')

    @patch('apps.core.stats.statsd')
    def test_increment(self, mock_statsd):
        """Test increment forwards to incr"""
        stats.increment('exercise.create')
        mock_statsd.return_value.incr.assert_called_once_with('exercise.create', 1)


class AppSchemeRedirectTestCase(TestCase):

    @override_settings(CLASSROOM_ASSISTANT_SCHEME='x-github-classroom')
    def test_allows_assistant_scheme(self):
        response = HttpResponseAppSchemeRedirect('x-github-classroom://?code=abc')
        self.assertEqual(response.status_code, 302)
        self.assertEqual(response['Location'], 'x-github-classroom://?code=abc')

    def test_rejects_other_schemes(self):
        from django.core.exceptions import DisallowedRedirect
        with self.assertRaises(DisallowedRedirect):
            HttpResponseAppSchemeRedirect('javascript:alert(1)')


class OrganizationView(OrganizationAuthorizationMixin, TemplateView):
    template_name = 'base.html'


class OrganizationAuthorizationMixinTestCase(TestCase):
    """Tests for organization scoped access control"""

    def setUp(self):
        self.factory = RequestFactory()
        self.organization = Organization.objects.create(title='CS 101', slug='cs-101')
        self.member = User.objects.create_user(username='member', password='pass')
        self.outsider = User.objects.create_user(username='outsider', password='pass')
        self.organization.users.add(self.member)

    def dispatch(self, user, slug='cs-101'):
        request = self.factory.get(f'/organizations/{slug}/')
        request.user = user
        view = OrganizationView()
        view.setup(request, organization_slug=slug)
        return view, view.dispatch(request, organization_slug=slug)

    def test_member_can_access(self):
        view, response = self.dispatch(self.member)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(view.organization, self.organization)

    def test_outsider_gets_404(self):
        """Test non-members cannot tell the organization exists"""
        with self.assertRaises(Http404):
            self.dispatch(self.outsider)

    def test_site_admin_can_access(self):
        self.outsider.profile.site_admin = True
        self.outsider.profile.save()
        _, response = self.dispatch(self.outsider)
        self.assertEqual(response.status_code, 200)

    def test_unknown_organization_404(self):
        with self.assertRaises(Http404):
            self.dispatch(self.member, slug='missing')

    def test_anonymous_redirected_to_login(self):
        from django.contrib.auth.models import AnonymousUser
        _, response = self.dispatch(AnonymousUser())
        self.assertEqual(response.status_code, 302)
        self.assertIn('/accounts/login/', response['Location'])


class SearchableListViewMixinTestCase(TestCase):
    """Tests for search/sort parameter handling"""

    def setUp(self):
        self.factory = RequestFactory()

    def make_view(self, params):
        view = SearchableListViewMixin()
        view.sort_param = 'sort_by'
        view.get_sort_modes = Mock(return_value={'Created at': ['created_at'], 'Name': ['name']})
        view.request = self.factory.get('/list/', params)
        return view

    def test_current_sort_mode_falls_back_to_first(self):
        view = self.make_view({'sort_by': 'Bogus'})
        self.assertEqual(view.get_current_sort_mode(), 'Created at')

    def test_current_sort_mode_from_request(self):
        view = self.make_view({'sort_by': 'Name'})
        self.assertEqual(view.get_current_sort_mode(), 'Name')

    def test_sort_mode_links_keep_query(self):
        view = self.make_view({'query': 'ada'})
        links = dict(view.get_sort_mode_links())
        self.assertEqual(links['Name'], '/list/?sort_by=Name&query=ada')

    def test_wants_partial(self):
        self.assertTrue(wants_partial(self.factory.get('/list/', {'format': 'js'})))
        self.assertTrue(wants_partial(self.factory.get('/list/', HTTP_X_REQUESTED_WITH='XMLHttpRequest')))
        self.assertFalse(wants_partial(self.factory.get('/list/')))
