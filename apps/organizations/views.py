"""
Views for organizations app.
"""

from django.contrib.auth.mixins import LoginRequiredMixin
from django.views.generic import ListView, TemplateView

from apps.core.mixins import OrganizationAuthorizationMixin
from .models import Organization


class OrganizationListView(LoginRequiredMixin, ListView):
    """Organizations the current user teaches in"""
    template_name = 'organizations/list.html'
    context_object_name = 'organizations'

    def get_queryset(self):
        return Organization.objects.filter(users=self.request.user).order_by('title')


class OrganizationDetailView(OrganizationAuthorizationMixin, TemplateView):
    """
    Organization home page.
    Lists the organization's (not deleted) assignments, newest first.
    """
    template_name = 'organizations/detail.html'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context['assignments'] = self.organization.assignments.order_by('-created_at')
        return context
