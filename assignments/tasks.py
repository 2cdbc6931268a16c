"""
Background tasks for assignments.

Tasks take primary keys so their arguments stay JSON serializable, and
re-read state when they run since rows may have changed since enqueueing.
"""
import logging

from django.tasks import task
from django.utils import timezone

from apps.github.client import GitHubClient, GitHubError

logger = logging.getLogger(__name__)


@task
def destroy_resource(assignment_id):
    """Delete an assignment that was marked for deletion, with its repos"""
    from .models import Assignment

    assignment = Assignment.all_objects.select_related('deadline').filter(pk=assignment_id).first()
    if assignment is None:
        logger.info(f"Assignment {assignment_id} already destroyed")
        return False

    if assignment.deleted_at is None:
        logger.warning(f"Assignment {assignment_id} is not marked for deletion, not destroying it")
        return False

    deadline = assignment.deadline
    repo_count = assignment.assignment_repos.count()
    assignment.delete()
    if deadline is not None:
        deadline.delete()

    logger.info(f"Destroyed assignment {assignment_id} and {repo_count} assignment repos")
    return True


@task
def record_deadline_submissions(deadline_id):
    """
    Record the head commit of every student repo once the deadline passes.
    Returns the number of repos recorded.
    """
    from .models import Assignment, Deadline

    deadline = Deadline.objects.filter(pk=deadline_id).first()
    if deadline is None:
        logger.info(f"Deadline {deadline_id} no longer exists")
        return 0

    if deadline.processed_at is not None:
        logger.info(f"Deadline {deadline_id} was already processed")
        return 0

    if not deadline.passed:
        logger.info(f"Deadline {deadline_id} has not passed yet")
        return 0

    try:
        assignment = deadline.assignment
    except Assignment.DoesNotExist:
        logger.info(f"Deadline {deadline_id} is not attached to an assignment")
        return 0

    if assignment.is_deleted:
        logger.info(f"Skipping deadline {deadline_id} of deleted assignment {assignment.pk}")
        return 0

    client = GitHubClient()
    recorded = 0
    for assignment_repo in assignment.assignment_repos.all():
        try:
            assignment_repo.submission_sha = client.branch_head_sha(assignment_repo.github_repo_id)
        except GitHubError as e:
            logger.error(f"Failed to record submission for assignment repo {assignment_repo.pk}: {str(e)}")
            continue
        assignment_repo.save(update_fields=['submission_sha'])
        recorded += 1

    deadline.processed_at = timezone.now()
    deadline.save(update_fields=['processed_at'])

    logger.info(f"Recorded {recorded} submissions for assignment {assignment.pk}")
    return recorded


@task
def update_repository_visibility(assignment_id, public_repo):
    """
    Make every student repo of the assignment public or private.
    Returns the number of repos that could not be updated.
    """
    from .models import Assignment

    assignment = Assignment.objects.filter(pk=assignment_id).first()
    if assignment is None:
        logger.info(f"Assignment {assignment_id} is gone, skipping visibility change")
        return 0

    client = GitHubClient()
    failures = 0
    for assignment_repo in assignment.assignment_repos.all():
        try:
            client.set_repository_visibility(assignment_repo.github_repo_id, public=public_repo)
        except GitHubError as e:
            failures += 1
            logger.error(f"Failed to update visibility of assignment repo {assignment_repo.pk}: {str(e)}")

    visibility = 'public' if public_repo else 'private'
    logger.info(f"Made repos of assignment {assignment_id} {visibility} ({failures} failures)")
    return failures
