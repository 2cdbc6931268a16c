"""
Short-lived API tokens handed to the classroom assistant app.
"""
import logging

from django.conf import settings
from django.contrib.auth.models import User
from django.core import signing

logger = logging.getLogger(__name__)

API_TOKEN_SALT = 'classroom.accounts.api_token'


def issue_api_token(user):
    """Sign the user's id into a URL-safe token"""
    return signing.dumps({'user_id': user.pk}, salt=API_TOKEN_SALT)


def verify_api_token(token, max_age=None):
    """
    Return the user a token was issued for, or None.

    Tokens older than settings.API_TOKEN_MAX_AGE seconds (or max_age) are
    rejected.
    """
    if max_age is None:
        max_age = settings.API_TOKEN_MAX_AGE

    try:
        payload = signing.loads(token, salt=API_TOKEN_SALT, max_age=max_age)
    except signing.SignatureExpired:
        logger.info("Rejected expired API token")
        return None
    except signing.BadSignature:
        logger.warning("Rejected API token with a bad signature")
        return None

    return User.objects.filter(pk=payload.get('user_id'), is_active=True).first()
