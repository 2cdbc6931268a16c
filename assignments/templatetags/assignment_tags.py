from django import template
from assignments.models import AssignmentRepo

register = template.Library()


@register.simple_tag
def get_assignment_repo(user, assignment):
    """Get the repo a (possibly unlinked) roster user has for an assignment"""
    if user is None:
        return None
    return AssignmentRepo.objects.filter(user=user, assignment=assignment).first()


@register.filter
def display_login(user):
    """GitHub login when known, otherwise the username"""
    if user is None:
        return ''
    profile = getattr(user, 'profile', None)
    if profile is not None and profile.github_login:
        return profile.github_login
    return user.username
