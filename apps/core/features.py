"""
Feature flags.

Flags listed in settings.FEATURE_FLAGS are on for everyone. Individual users
can be opted in through UserProfile.feature_flags.
"""
from django.conf import settings


def feature_enabled(name, user=None):
    """Return True if the named flag is on globally or for this user"""
    if name in getattr(settings, 'FEATURE_FLAGS', []):
        return True

    if user is None or not user.is_authenticated:
        return False

    profile = getattr(user, 'profile', None)
    if profile is None:
        return False

    return name in (profile.feature_flags or [])


def search_assignments_enabled(user=None):
    return feature_enabled('search_assignments', user)
