from django.test import TestCase
from django.contrib.auth.models import User
from django.core import signing
from apps.accounts.models import UserProfile
from apps.accounts.tokens import issue_api_token, verify_api_token
from unittest.mock import patch


class UserProfileSignalTestCase(TestCase):
    """Tests for the auto-created profile"""

    def test_profile_created_with_user(self):
        user = User.objects.create_user(username='octocat', password='pass')
        self.assertTrue(UserProfile.objects.filter(user=user).exists())
        self.assertFalse(user.profile.site_admin)
        self.assertEqual(user.profile.feature_flags, [])

    def test_display_login_prefers_github_login(self):
        user = User.objects.create_user(username='local-name', password='pass')
        self.assertEqual(user.profile.display_login, 'local-name')

        user.profile.github_login = 'octocat'
        user.profile.save()
        self.assertEqual(user.profile.display_login, 'octocat')


class ApiTokenTestCase(TestCase):
    """Tests for assistant API tokens"""

    def setUp(self):
        self.user = User.objects.create_user(username='teacher', password='pass')

    def test_round_trip(self):
        token = issue_api_token(self.user)
        self.assertEqual(verify_api_token(token), self.user)

    def test_bad_signature_rejected(self):
        token = issue_api_token(self.user)
        with self.assertLogs('apps.accounts.tokens', level='WARNING'):
            self.assertIsNone(verify_api_token(token + 'x'))

    def test_token_from_other_salt_rejected(self):
        token = signing.dumps({'user_id': self.user.pk}, salt='something-else')
        with self.assertLogs('apps.accounts.tokens', level='WARNING'):
            self.assertIsNone(verify_api_token(token))

    @patch('apps.accounts.tokens.signing.loads')
    def test_expired_token_rejected(self, mock_loads):
        mock_loads.side_effect = signing.SignatureExpired('expired')
        with self.assertLogs('apps.accounts.tokens', level='INFO') as logs:
            self.assertIsNone(verify_api_token('anything'))
        self.assertTrue(any('expired' in line for line in logs.output))

    def test_inactive_user_rejected(self):
        token = issue_api_token(self.user)
        self.user.is_active = False
        self.user.save()
        self.assertIsNone(verify_api_token(token))

