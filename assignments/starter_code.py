"""
Resolving the starter code repository a teacher picked for an assignment.
"""
import logging
import re

from django.contrib import messages
from django.shortcuts import redirect

from apps.github.client import GitHubClient, GitHubError, GitHubNotFound

logger = logging.getLogger(__name__)


class InvalidStarterCodeError(Exception):
    """The chosen starter code repository cannot be used"""


NOT_FOUND_MESSAGE = "Starter code repository does not exist or you do not have access to it."
UNAVAILABLE_MESSAGE = "We could not reach GitHub to check the starter code repository, please try again."


class StarterCodeMixin:
    """
    View mixin that turns the ``repo_id``/``repo_name`` form values into a
    GitHub repository id.

    Invalid starter code aborts the request with an error message and a
    redirect back to the form.
    """

    def dispatch(self, request, *args, **kwargs):
        try:
            return super().dispatch(request, *args, **kwargs)
        except InvalidStarterCodeError as e:
            messages.error(request, str(e))
            return redirect(request.get_full_path())

    def get_github_client(self):
        return GitHubClient()

    def starter_code_submitted(self):
        """Whether the form names a starter code repository at all"""
        return bool(
            self.request.POST.get('repo_id', '').strip()
            or re.sub(r'\s+', '', self.request.POST.get('repo_name', ''))
        )

    def starter_code_repo_id_param(self):
        repo_id = self.request.POST.get('repo_id', '').strip()
        if repo_id:
            return self.validate_starter_code_repository_id(repo_id)
        return self.starter_code_repository_id(self.request.POST.get('repo_name', ''))

    def starter_code_repository_id(self, repo_name):
        """Look up "owner/name" on GitHub; blank names mean no starter code"""
        sanitized_repo_name = re.sub(r'\s+', '', repo_name or '')
        if not sanitized_repo_name:
            return None

        try:
            return self.get_github_client().repository(sanitized_repo_name)['id']
        except ValueError as e:
            raise InvalidStarterCodeError(str(e)) from e
        except GitHubNotFound as e:
            raise InvalidStarterCodeError(NOT_FOUND_MESSAGE) from e
        except GitHubError as e:
            logger.error(f"Starter code lookup for {sanitized_repo_name} failed: {str(e)}")
            raise InvalidStarterCodeError(UNAVAILABLE_MESSAGE) from e

    def validate_starter_code_repository_id(self, repo_id):
        """Confirm a repository id picked from the search widget is reachable"""
        try:
            repo_id = int(repo_id)
        except (TypeError, ValueError) as e:
            raise InvalidStarterCodeError(f"\"{repo_id}\" is not a valid repository id.") from e

        try:
            return self.get_github_client().repository(repo_id)['id']
        except GitHubNotFound as e:
            raise InvalidStarterCodeError(NOT_FOUND_MESSAGE) from e
        except GitHubError as e:
            logger.error(f"Starter code lookup for repository {repo_id} failed: {str(e)}")
            raise InvalidStarterCodeError(UNAVAILABLE_MESSAGE) from e
