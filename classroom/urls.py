"""
URL configuration for the classroom project.

Assignment routes nest under their organization:
    /organizations/<organization_slug>/assignments/<slug>/
"""
from django.contrib import admin
from django.urls import path, include
from django.views.generic import RedirectView

urlpatterns = [
    path('admin/', admin.site.urls),
    path('accounts/', include('django.contrib.auth.urls')),  # login, logout, password reset
    path('organizations/', include('apps.organizations.urls')),
    path('organizations/<slug:organization_slug>/assignments/', include('assignments.urls')),
    path('lti/', include('apps.lti.urls')),
    path('', RedirectView.as_view(pattern_name='organizations:list', permanent=False), name='home'),
]
