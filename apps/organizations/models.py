from django.db import models
from django.contrib.auth.models import User
from django.db.models import Case, Exists, OuterRef, Value, When
from django.urls import reverse

from apps.core.querysets import SortableQuerySet


class Organization(models.Model):
    """
    A classroom: a GitHub organization and the teachers who manage it.
    """
    title = models.CharField(max_length=200)
    slug = models.SlugField(max_length=200, unique=True)
    github_id = models.BigIntegerField(null=True, blank=True, unique=True)
    users = models.ManyToManyField(
        User,
        related_name='organizations',
        blank=True,
        help_text="Teachers who can manage this organization"
    )
    roster = models.ForeignKey(
        'Roster',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='organizations',
        help_text="Class list linked to this organization, if any"
    )

    # Metadata
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['title']

    def __str__(self):
        return self.title

    def get_absolute_url(self):
        return reverse('organizations:detail', kwargs={'organization_slug': self.slug})

    def get_lti_configuration(self):
        """Return the LTI configuration or None when the organization has none"""
        try:
            return self.lti_configuration
        except LtiConfiguration.DoesNotExist:
            return None


class Roster(models.Model):
    """A class list; entries are linked to users as students accept invitations"""
    identifier_name = models.CharField(
        max_length=100,
        default='Identifiers',
        help_text="What the entries are called, e.g. 'Emails' or 'Student IDs'"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Roster #{self.pk} ({self.identifier_name})"


class RosterEntryQuerySet(SortableQuerySet):
    """Search, view grouping and sort modes for roster entry listings"""

    SORT_MODES = {
        'Student identifier': ['identifier'],
        'Created at': ['created_at'],
    }
    SEARCH_FIELDS = ['identifier']

    def order_for_view(self, assignment):
        """
        Group entries for the assignment page: students who accepted the
        assignment first, then linked students without a repo, then entries
        not linked to any account.
        """
        from assignments.models import AssignmentRepo

        accepted = AssignmentRepo.objects.filter(assignment=assignment, user=OuterRef('user_id'))
        return self.annotate(
            view_rank=Case(
                When(user__isnull=True, then=Value(2)),
                When(Exists(accepted), then=Value(0)),
                default=Value(1),
            )
        ).then_order_by('view_rank')

    def order_by_sort_mode(self, sort_mode, assignment=None):
        queryset = self
        if assignment is not None and 'view_rank' not in self.query.annotations:
            queryset = queryset.order_for_view(assignment)
        return queryset.then_order_by(*self.SORT_MODES.get(sort_mode, []))


class RosterEntry(models.Model):
    roster = models.ForeignKey(
        Roster,
        on_delete=models.CASCADE,
        related_name='roster_entries'
    )
    identifier = models.CharField(max_length=255)
    user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='roster_entries',
        help_text="Account linked to this entry; empty until the student is linked"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    objects = RosterEntryQuerySet.as_manager()

    class Meta:
        verbose_name_plural = 'roster entries'
        unique_together = [['roster', 'identifier']]

    def __str__(self):
        return self.identifier

    @classmethod
    def sort_modes(cls):
        return RosterEntryQuerySet.SORT_MODES


class LtiConfiguration(models.Model):
    """Consumer credentials an LMS uses to launch into an organization"""
    organization = models.OneToOneField(
        Organization,
        on_delete=models.CASCADE,
        related_name='lti_configuration'
    )
    consumer_key = models.CharField(max_length=255, unique=True)
    shared_secret = models.CharField(max_length=255)
    lms_link = models.URLField(blank=True)
    context_id = models.CharField(max_length=255, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'LTI configuration'

    def __str__(self):
        return f"LTI configuration for {self.organization}"
