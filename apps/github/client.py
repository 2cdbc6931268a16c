"""
Minimal GitHub REST client.

Only the calls the assignment workflow needs: repository lookup, visibility
changes and reading a branch head for submission snapshots.
"""
import logging

import requests
from django.conf import settings
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)


class GitHubError(Exception):
    """A GitHub request failed"""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class GitHubNotFound(GitHubError):
    """The resource does not exist or the token cannot see it"""


class GitHubClient:
    """A requests session authenticated against the GitHub API"""

    def __init__(self, token=None, base_url=None, timeout=None):
        self.base_url = (base_url or settings.GITHUB_API_URL).rstrip('/')
        self.timeout = timeout or settings.GITHUB_TIMEOUT

        self.session = requests.Session()
        retries = Retry(total=3, backoff_factor=1, status_forcelist=[502, 503, 504])
        self.session.mount('https://', HTTPAdapter(max_retries=retries))
        self.session.headers.update({
            'Accept': 'application/vnd.github+json',
            'X-GitHub-Api-Version': '2022-11-28',
        })

        token = token if token is not None else settings.GITHUB_TOKEN
        if token:
            self.session.headers['Authorization'] = f"Bearer {token}"

    def _request(self, method, path, **kwargs):
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"GitHub request {method} {path} failed: {str(e)}")
            raise GitHubError(f"Could not reach GitHub: {e}") from e

        if response.status_code == 404:
            raise GitHubNotFound(f"GitHub resource not found: {path}", status_code=404)
        if response.status_code >= 400:
            logger.error(f"GitHub request {method} {path} returned {response.status_code}")
            raise GitHubError(
                f"GitHub returned {response.status_code} for {path}",
                status_code=response.status_code
            )

        if response.status_code == 204 or not response.content:
            return {}
        return response.json()

    def repository(self, repo):
        """
        Fetch a repository by numeric id or by "owner/name".
        """
        if isinstance(repo, int):
            return self._request('GET', f"/repositories/{repo}")

        if not isinstance(repo, str) or repo.count('/') != 1 or repo.startswith('/') or repo.endswith('/'):
            raise ValueError(f"Invalid repository name \"{repo}\", use the format owner/name")
        return self._request('GET', f"/repos/{repo}")

    def set_repository_visibility(self, repo_id, public):
        """Make the repository public or private"""
        repository = self.repository(repo_id)
        return self._request(
            'PATCH',
            f"/repos/{repository['full_name']}",
            json={'private': not public},
        )

    def branch_head_sha(self, repo_id, branch=None):
        """SHA of the head commit of branch (default branch when omitted)"""
        repository = self.repository(repo_id)
        branch = branch or repository.get('default_branch', 'main')
        data = self._request('GET', f"/repos/{repository['full_name']}/branches/{branch}")
        return data['commit']['sha']
