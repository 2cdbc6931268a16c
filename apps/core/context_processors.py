"""
Context processors for core app.
Provides global template variables.
"""

from .features import search_assignments_enabled


def feature_flags(request):
    """
    Expose feature flags used by shared templates.
    """
    return {
        'search_assignments_enabled': search_assignments_enabled(getattr(request, 'user', None)),
    }
