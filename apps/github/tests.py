from django.test import SimpleTestCase, override_settings
from apps.github.client import GitHubClient, GitHubError, GitHubNotFound
from unittest.mock import Mock, patch
import requests


def make_response(status_code=200, json_data=None):
    response = Mock()
    response.status_code = status_code
    response.content = b'{}' if json_data is not None else b''
    response.json.return_value = json_data
    return response


@override_settings(GITHUB_API_URL='https://api.github.test', GITHUB_TOKEN='secret-token', GITHUB_TIMEOUT=5)
class GitHubClientTestCase(SimpleTestCase):
    """Tests for the GitHub REST client (session is mocked)"""

    def setUp(self):
        self.client_ = GitHubClient()
        self.request = patch.object(self.client_.session, 'request').start()
        self.addCleanup(patch.stopall)

    def test_token_sent_as_bearer(self):
        self.assertEqual(self.client_.session.headers['Authorization'], 'Bearer secret-token')

    def test_repository_by_id(self):
        self.request.return_value = make_response(json_data={'id': 42})
        self.assertEqual(self.client_.repository(42), {'id': 42})
        self.request.assert_called_once_with('GET', 'https://api.github.test/repositories/42', timeout=5)

    def test_repository_by_name(self):
        self.request.return_value = make_response(json_data={'id': 7})
        self.assertEqual(self.client_.repository('octo/starter')['id'], 7)
        self.request.assert_called_once_with('GET', 'https://api.github.test/repos/octo/starter', timeout=5)

    def test_repository_invalid_name(self):
        for name in ['starter', 'a/b/c', '/starter', 'octo/']:
            with self.assertRaises(ValueError):
                self.client_.repository(name)
        self.request.assert_not_called()

    def test_not_found(self):
        self.request.return_value = make_response(status_code=404)
        with self.assertRaises(GitHubNotFound) as cm:
            self.client_.repository('octo/missing')
        self.assertEqual(cm.exception.status_code, 404)

    def test_server_error(self):
        self.request.return_value = make_response(status_code=500)
        with self.assertLogs('apps.github.client', level='ERROR'):
            with self.assertRaises(GitHubError) as cm:
                self.client_.repository(1)
        self.assertNotIsInstance(cm.exception, GitHubNotFound)
        self.assertEqual(cm.exception.status_code, 500)

    def test_connection_error(self):
        self.request.side_effect = requests.ConnectionError('boom')
        with self.assertLogs('apps.github.client', level='ERROR'):
            with self.assertRaises(GitHubError):
                self.client_.repository(1)

    def test_set_repository_visibility(self):
        self.request.side_effect = [
            make_response(json_data={'id': 1, 'full_name': 'octo/hw-1-ada'}),
            make_response(json_data={'private': True}),
        ]
        self.client_.set_repository_visibility(1, public=False)
        self.request.assert_called_with(
            'PATCH', 'https://api.github.test/repos/octo/hw-1-ada', timeout=5, json={'private': True}
        )

    def test_branch_head_sha_uses_default_branch(self):
        self.request.side_effect = [
            make_response(json_data={'id': 1, 'full_name': 'octo/hw-1-ada', 'default_branch': 'trunk'}),
            make_response(json_data={'commit': {'sha': 'abc123'}}),
        ]
        self.assertEqual(self.client_.branch_head_sha(1), 'abc123')
        self.request.assert_called_with(
            'GET', 'https://api.github.test/repos/octo/hw-1-ada/branches/trunk', timeout=5
        )
