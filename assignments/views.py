"""
Views for assignments app.

Every view runs inside an organization (see OrganizationAuthorizationMixin);
all but create look the assignment up by slug within that organization.
"""
import logging
from urllib.parse import quote_plus

from django.conf import settings
from django.contrib import messages
from django.db import transaction
from django.http import Http404
from django.shortcuts import get_object_or_404, redirect, render
from django.urls import reverse
from django.views.generic import CreateView, TemplateView, UpdateView, View

from apps.accounts.tokens import issue_api_token
from apps.core import stats
from apps.core.features import search_assignments_enabled
from apps.core.mixins import OrganizationAuthorizationMixin
from apps.core.responses import HttpResponseAppSchemeRedirect
from apps.core.views import SearchableListViewMixin, wants_partial
from apps.lti.content_item import ContentItemService
from apps.lti.message_store import lti_message_store
from apps.organizations.models import RosterEntry
from .editor import AssignmentEditor
from .forms import AssignmentForm
from .models import Assignment, AssignmentRepo
from .starter_code import StarterCodeMixin
from .tasks import destroy_resource

logger = logging.getLogger(__name__)

LIST_TYPE_ROSTER_ENTRIES = 'roster_entries'
LIST_TYPE_ASSIGNMENT_REPOS = 'assignment_repos'


class AssignmentLookupMixin:
    """
    Loads ``self.assignment`` from the ``slug`` URL kwarg, scoped to
    ``self.organization``. Must come after OrganizationAuthorizationMixin.
    """

    def dispatch(self, request, *args, **kwargs):
        self.assignment = get_object_or_404(
            self.organization.assignments.select_related('assignment_invitation', 'deadline'),
            slug=kwargs['slug']
        )
        return super().dispatch(request, *args, **kwargs)

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context['assignment'] = self.assignment
        return context


# ============================================================================
# Create / edit
# ============================================================================

class AssignmentCreateView(OrganizationAuthorizationMixin, StarterCodeMixin, CreateView):
    """
    New assignment form and creation.
    """
    form_class = AssignmentForm
    template_name = 'assignments/new.html'

    def get_form_kwargs(self):
        kwargs = super().get_form_kwargs()
        kwargs['instance'] = Assignment(organization=self.organization, creator=self.request.user)
        return kwargs

    def form_valid(self, form):
        assignment = form.save(commit=False)
        assignment.starter_code_repo_id = self.starter_code_repo_id_param()
        deadline = form.build_deadline()

        with transaction.atomic():
            if deadline is not None:
                deadline.save()
                assignment.deadline = deadline
            assignment.save()
            assignment.create_assignment_invitation()

        if assignment.deadline is not None:
            assignment.deadline.create_job()

        self.send_create_assignment_statsd_events(assignment)
        logger.info(f"Assignment {assignment.pk} created in {self.organization.slug} by {self.request.user.username}")

        messages.success(self.request, f'"{assignment.title}" has been created!')
        return redirect(assignment)

    @staticmethod
    def send_create_assignment_statsd_events(assignment):
        stats.increment('exercise.create')
        if assignment.deadline is not None:
            stats.increment('deadline.create')


class AssignmentUpdateView(OrganizationAuthorizationMixin, AssignmentLookupMixin, StarterCodeMixin, UpdateView):
    """
    Edit form; changes are applied by AssignmentEditor.
    """
    form_class = AssignmentForm
    template_name = 'assignments/edit.html'

    def get_object(self, queryset=None):
        return self.assignment

    def form_valid(self, form):
        options = form.editor_options()
        # Blank starter code fields keep the current repository
        if self.request.POST.get('remove_starter_code'):
            options['starter_code_repo_id'] = None
        elif self.starter_code_submitted():
            options['starter_code_repo_id'] = self.starter_code_repo_id_param()

        result = AssignmentEditor.perform(assignment=self.assignment, options=options)
        if result.is_success:
            messages.success(self.request, f'Assignment "{self.assignment.title}" is being updated')
            return redirect(self.assignment)

        form.add_error(None, result.error)
        return self.form_invalid(form)

    def form_invalid(self, form):
        # The bound form already wrote its values onto the instance; links on
        # the page need a real slug.
        if not self.assignment.slug:
            self.assignment.refresh_from_db()
        return super().form_invalid(form)


class AssignmentDeleteView(OrganizationAuthorizationMixin, AssignmentLookupMixin, View):
    """
    Queue an assignment for deletion.
    The row is hidden right away; a background task removes it.
    """
    http_method_names = ['post']

    def post(self, request, *args, **kwargs):
        assignment = self.assignment

        if not assignment.soft_delete():
            messages.error(request, f'"{assignment.title}" could not be deleted.')
            return render(request, 'assignments/edit.html', {
                'form': AssignmentForm(instance=assignment),
                'assignment': assignment,
                'organization': self.organization,
            })

        destroy_resource.enqueue(assignment.pk)
        stats.increment('exercise.destroy')

        messages.success(request, f'"{assignment.title}" is being deleted')
        return redirect(self.organization)


# ============================================================================
# Show
# ============================================================================

class AssignmentDetailView(OrganizationAuthorizationMixin, AssignmentLookupMixin,
                           SearchableListViewMixin, TemplateView):
    """
    Assignment page.

    With a roster, lists roster entries plus accounts that accepted the
    assignment without being on the roster; otherwise lists the assignment
    repos. Script requests get just the filtered list.
    """
    template_name = 'assignments/show.html'
    partial_template_name = 'assignments/_filter_repos.html'
    sort_param = 'sort_assignment_repos_by'
    search_param = 'query'

    def get(self, request, *args, **kwargs):
        if wants_partial(request) and not search_assignments_enabled(request.user):
            raise Http404("Assignment search is not enabled.")
        return super().get(request, *args, **kwargs)

    def get_template_names(self):
        if wants_partial(self.request):
            return [self.partial_template_name]
        return super().get_template_names()

    @property
    def list_type(self):
        if self.organization.roster_id:
            return LIST_TYPE_ROSTER_ENTRIES
        return LIST_TYPE_ASSIGNMENT_REPOS

    def get_sort_modes(self):
        if self.list_type == LIST_TYPE_ROSTER_ENTRIES:
            return RosterEntry.sort_modes()
        return AssignmentRepo.sort_modes()

    def get_unlinked_users(self):
        """
        Users who accepted the assignment but are not on the organization
        roster. None when the organization has no roster.
        """
        roster = self.organization.roster
        if roster is None:
            return None

        roster_user_ids = roster.roster_entries.filter(user__isnull=False).values('user_id')
        return self.assignment.users().exclude(pk__in=roster_user_ids)

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)

        query = self.get_search_query()
        current_sort_mode = self.get_current_sort_mode()

        context.update({
            'list_type': self.list_type,
            'query': query,
            'assignment_sort_modes': self.get_sort_modes(),
            'current_sort_mode': current_sort_mode,
            'assignment_sort_modes_links': self.get_sort_mode_links(),
        })

        if self.list_type == LIST_TYPE_ASSIGNMENT_REPOS:
            assignment_repos = (
                self.assignment.assignment_repos
                .select_related('user', 'user__profile')
                .filter_by_search(query)
                .order_by_sort_mode(current_sort_mode)
                .then_order_by('id')
            )
            context['assignment_repos'] = self.paginate(assignment_repos, 'page')

        else:
            roster_entries = (
                self.organization.roster.roster_entries
                .select_related('user', 'user__profile')
                .filter_by_search(query)
                .order_for_view(self.assignment)
                .order_by_sort_mode(current_sort_mode, assignment=self.assignment)
                .then_order_by('id')
            )
            context['roster_entries'] = self.paginate(roster_entries, 'students_page')

            unlinked_user_repos = (
                AssignmentRepo.objects
                .filter(assignment=self.assignment, user__in=self.get_unlinked_users())
                .select_related('user', 'user__profile')
                .order_by('id')
            )
            context['unlinked_user_repos'] = self.paginate(unlinked_user_repos, 'unlinked_accounts_page')

        return context


# ============================================================================
# Integrations
# ============================================================================

class AssignmentAssistantView(OrganizationAuthorizationMixin, AssignmentLookupMixin, View):
    """
    Hand the assignment over to the classroom assistant desktop app.
    """

    def get(self, request, *args, **kwargs):
        code_param = issue_api_token(request.user)
        url_param = quote_plus(request.build_absolute_uri(self.assignment.get_absolute_url()))

        return HttpResponseAppSchemeRedirect(
            f"{settings.CLASSROOM_ASSISTANT_SCHEME}://?assignment_url={url_param}&code={code_param}"
        )


class AssignmentLinkToLmsView(OrganizationAuthorizationMixin, AssignmentLookupMixin, TemplateView):
    """
    Reply to an LMS content-item request with a link to this assignment.

    Renders a form the browser submits to the LMS return URL carrying the
    signed ContentItemSelection payload.
    """
    template_name = 'assignments/link_to_lms.html'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)

        lti_configuration = self.organization.get_lti_configuration()
        if lti_configuration is None:
            raise Http404("This organization is not linked to an LMS.")

        store = lti_message_store(lti_configuration)
        message = store.get_message(self.request.session.get('lti_nonce'))
        if message is None or not message.content_item_return_url:
            raise Http404("No LMS launch is in progress for this session.")

        content_item_service = ContentItemService(
            message.content_item_return_url,
            lti_configuration.consumer_key,
            lti_configuration.shared_secret,
        )

        content_item = content_item_service.build_lti_link(
            self.assignment.title,
            self.request.build_absolute_uri(reverse('lti:launch')),
            custom={'assignment_id': self.assignment.pk},
        )

        context['form_submit_url'] = message.content_item_return_url
        context['payload'] = content_item_service.signed_content(content_item, data=message.data)
        return context
