"""
OAuth 1.0 request validation for LTI launches.

oauthlib drives the signature check; this validator answers its questions
from LtiConfiguration rows and uses the cache to reject replayed nonces.
"""
from django.conf import settings
from django.core.cache import cache
from oauthlib import oauth1

from apps.organizations.models import LtiConfiguration


class LtiRequestValidator(oauth1.RequestValidator):

    # Consumer keys and nonces are chosen by the LMS, not by us
    safe_characters = set(chr(c) for c in range(33, 127))
    client_key_length = (1, 255)
    nonce_length = (1, 255)

    dummy_secret = 'classroom-lti-dummy-secret'

    @property
    def enforce_ssl(self):
        return settings.LTI_ENFORCE_SSL

    @property
    def allowed_signature_methods(self):
        return (oauth1.SIGNATURE_HMAC_SHA1,)

    @property
    def dummy_client(self):
        return 'classroom-lti-dummy-client'

    def get_configuration(self, client_key):
        return (
            LtiConfiguration.objects
            .select_related('organization')
            .filter(consumer_key=client_key)
            .first()
        )

    def validate_client_key(self, client_key, request):
        configuration = self.get_configuration(client_key)
        if configuration is None:
            return False
        request.lti_configuration = configuration
        return True

    def get_client_secret(self, client_key, request):
        configuration = getattr(request, 'lti_configuration', None) or self.get_configuration(client_key)
        if configuration is None:
            return self.dummy_secret
        return configuration.shared_secret

    def validate_timestamp_and_nonce(self, client_key, timestamp, nonce, request,
                                     request_token=None, access_token=None):
        # Called before the signature is checked, so a forged launch also
        # spends its nonce. cache.add is a no-op (and returns False) when the
        # key already exists.
        return cache.add(
            f"lti-nonce:{client_key}:{timestamp}:{nonce}",
            True,
            self.timestamp_lifetime,
        )
