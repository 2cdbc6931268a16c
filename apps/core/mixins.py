"""
Shared mixins for access control across apps
"""

from django.contrib.auth.mixins import LoginRequiredMixin
from django.http import Http404
from django.shortcuts import get_object_or_404


class OrganizationAuthorizationMixin(LoginRequiredMixin):
    """
    Mixin to require access to the organization named in the URL.

    Loads the organization from the ``organization_slug`` URL kwarg into
    ``self.organization`` before the view runs. Users who are neither a
    member of the organization nor a site admin get a 404, so the existence
    of other organizations is not revealed.

    Subclasses can customize behavior by overriding:
    - organization_url_kwarg: URL kwarg holding the organization slug
    """

    organization_url_kwarg = 'organization_slug'

    def dispatch(self, request, *args, **kwargs):
        """Check organization access before allowing access"""
        if not request.user.is_authenticated:
            return self.handle_no_permission()

        self.organization = self.get_organization()
        if not self.can_access_organization(request.user, self.organization):
            raise Http404("No organization matches the given query.")

        return super().dispatch(request, *args, **kwargs)

    def get_organization(self):
        from apps.organizations.models import Organization

        return get_object_or_404(
            Organization.objects.select_related('roster'),
            slug=self.kwargs[self.organization_url_kwarg]
        )

    @staticmethod
    def can_access_organization(user, organization):
        profile = getattr(user, 'profile', None)
        if user.is_superuser or (profile is not None and profile.site_admin):
            return True
        return organization.users.filter(pk=user.pk).exists()

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context['organization'] = self.organization
        return context
