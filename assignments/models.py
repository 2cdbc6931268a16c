import logging

from django.db import models
from django.contrib.auth.models import User
from django.core.exceptions import ValidationError
from django.urls import reverse
from django.utils import timezone
from django.utils.crypto import get_random_string
from django.utils.text import slugify

from apps.core.querysets import SortableQuerySet
from apps.organizations.models import Organization

logger = logging.getLogger(__name__)


# Path segments used by assignment routes that are not assignment slugs
RESERVED_SLUGS = {'new'}


class AssignmentManager(models.Manager):
    """Default manager: hides assignments waiting to be destroyed"""

    def get_queryset(self):
        return super().get_queryset().filter(deleted_at__isnull=True)


class Assignment(models.Model):
    """
    An individual exercise in an organization.
    Each student who accepts the invitation gets their own repository,
    optionally seeded from a starter code repository.
    """
    organization = models.ForeignKey(
        Organization,
        on_delete=models.CASCADE,
        related_name='assignments'
    )
    creator = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_assignments',
        help_text="Teacher who created this assignment"
    )
    title = models.CharField(max_length=200)
    slug = models.SlugField(
        max_length=200,
        blank=True,
        help_text="Repository prefix; generated from the title when left blank"
    )

    # Repository settings
    public_repo = models.BooleanField(
        default=True,
        help_text="Whether student repositories are public"
    )
    students_are_repo_admins = models.BooleanField(
        default=False,
        help_text="Give students admin access to their repositories"
    )
    invitations_enabled = models.BooleanField(
        default=True,
        help_text="Whether the invitation link accepts new students"
    )
    template_repos_enabled = models.BooleanField(
        default=False,
        help_text="Create student repositories from the starter code template"
    )
    starter_code_repo_id = models.BigIntegerField(
        null=True,
        blank=True,
        help_text="GitHub id of the starter code repository"
    )
    deadline = models.OneToOneField(
        'Deadline',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='assignment'
    )

    # Metadata
    deleted_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Set when the assignment is queued for deletion"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = AssignmentManager()
    all_objects = models.Manager()

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['organization', 'slug'], name='assignment_org_slug_idx'),
        ]

    def __str__(self):
        return self.title

    def get_absolute_url(self):
        return reverse('assignments:show', kwargs={
            'organization_slug': self.organization.slug,
            'slug': self.slug,
        })

    def clean(self):
        """Fill in the slug and keep title and slug unique within the organization"""
        if not self.slug and self.title:
            self.slug = slugify(self.title)

        # A title such as "!!!" slugifies to nothing
        if not self.slug:
            raise ValidationError({'slug': 'Repository prefix can\'t be blank, please choose one.'})

        if not self.organization_id:
            return

        siblings = Assignment.objects.filter(organization_id=self.organization_id)
        if self.pk:
            siblings = siblings.exclude(pk=self.pk)

        errors = {}
        if self.slug in RESERVED_SLUGS:
            errors['slug'] = f'"{self.slug}" is reserved, please choose another repository prefix.'
        if self.title and siblings.filter(title__iexact=self.title).exists():
            errors['title'] = 'An assignment with this title already exists in this organization.'
        if self.slug and siblings.filter(slug=self.slug).exists():
            errors['slug'] = 'An assignment with this repository prefix already exists in this organization.'
        if errors:
            raise ValidationError(errors)

    def create_assignment_invitation(self):
        return AssignmentInvitation.objects.create(assignment=self)

    def users(self):
        """Users who have accepted the assignment (have a repo for it)"""
        return User.objects.filter(assignment_repos__assignment=self).distinct()

    def soft_delete(self):
        """
        Mark the assignment for deletion.
        Returns False if the row was already gone or already marked.
        """
        now = timezone.now()
        updated = Assignment.objects.filter(pk=self.pk).update(deleted_at=now, updated_at=now)
        if updated:
            self.deleted_at = now
        return updated == 1

    @property
    def is_deleted(self):
        return self.deleted_at is not None


def generate_invitation_key():
    return get_random_string(32)


def generate_invitation_short_key():
    return get_random_string(8)


class AssignmentInvitation(models.Model):
    """The link students follow to accept an assignment"""
    assignment = models.OneToOneField(
        Assignment,
        on_delete=models.CASCADE,
        related_name='assignment_invitation'
    )
    key = models.CharField(max_length=64, unique=True, default=generate_invitation_key)
    short_key = models.CharField(max_length=16, unique=True, default=generate_invitation_short_key)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Invitation to {self.assignment.title}"


class AssignmentRepoQuerySet(SortableQuerySet):
    """Search and sort modes for assignment repo listings"""

    SORT_MODES = {
        'Created at': ['created_at'],
        'GitHub login': ['user__profile__github_login', 'user__username'],
    }
    SEARCH_FIELDS = ['user__profile__github_login', 'user__username']


class AssignmentRepo(models.Model):
    """A student's repository for an assignment"""
    assignment = models.ForeignKey(
        Assignment,
        on_delete=models.CASCADE,
        related_name='assignment_repos'
    )
    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='assignment_repos'
    )
    github_repo_id = models.BigIntegerField()
    submission_sha = models.CharField(
        max_length=40,
        blank=True,
        help_text="Head commit recorded when the deadline passed"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    objects = AssignmentRepoQuerySet.as_manager()

    class Meta:
        unique_together = [['assignment', 'user']]

    def __str__(self):
        return f"{self.assignment.title} - {self.user.username}"

    @classmethod
    def sort_modes(cls):
        return AssignmentRepoQuerySet.SORT_MODES


class Deadline(models.Model):
    """When submissions for an assignment are snapshotted"""
    deadline_at = models.DateTimeField()
    processed_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When submissions were recorded for this deadline"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['deadline_at']

    def __str__(self):
        return f"Deadline at {self.deadline_at:%Y-%m-%d %H:%M}"

    def clean(self):
        if self.deadline_at and self.deadline_at <= timezone.now():
            raise ValidationError({'deadline_at': 'Deadline must be in the future.'})

    @property
    def passed(self):
        return self.deadline_at <= timezone.now()

    def create_job(self):
        """
        Schedule submission recording for the deadline.

        Backends that cannot defer tasks only get passed deadlines; future
        ones are picked up by the process_deadlines management command.
        """
        from django.tasks import default_task_backend
        from .tasks import record_deadline_submissions

        if default_task_backend.supports_defer:
            return record_deadline_submissions.using(run_after=self.deadline_at).enqueue(self.pk)

        if self.passed:
            return record_deadline_submissions.enqueue(self.pk)

        logger.info(f"Deadline {self.pk} left for process_deadlines (task backend cannot defer)")
        return None
