"""
Cache-backed store for LTI launch messages.

A launch arrives before the teacher picks an assignment; the message is kept
under its OAuth nonce so a later content-item reply can find the return URL
and opaque ``data`` the LMS expects back.
"""
import logging

from django.conf import settings
from django.core.cache import cache as default_cache

logger = logging.getLogger(__name__)


class LtiMessage:
    """Read-only view over the parameters of an LTI launch"""

    def __init__(self, params):
        self.params = dict(params)

    def __getitem__(self, key):
        return self.params[key]

    def get(self, key, default=None):
        return self.params.get(key, default)

    @property
    def nonce(self):
        return self.params.get('oauth_nonce')

    @property
    def consumer_key(self):
        return self.params.get('oauth_consumer_key')

    @property
    def message_type(self):
        return self.params.get('lti_message_type')

    @property
    def content_item_return_url(self):
        return self.params.get('content_item_return_url')

    @property
    def data(self):
        return self.params.get('data')

    @property
    def context_id(self):
        return self.params.get('context_id')

    @property
    def is_content_item_request(self):
        return self.message_type == 'ContentItemSelectionRequest'


class LtiMessageStore:
    """Messages for one LTI configuration, keyed by nonce"""

    def __init__(self, lti_configuration, cache=None, timeout=None):
        self.lti_configuration = lti_configuration
        self.cache = cache or default_cache
        self.timeout = timeout if timeout is not None else settings.LTI_MESSAGE_TTL

    def _key(self, nonce):
        return f"lti-message:{self.lti_configuration.consumer_key}:{nonce}"

    def save_message(self, message):
        if not message.nonce:
            raise ValueError("LTI message has no oauth_nonce")
        self.cache.set(self._key(message.nonce), message.params, self.timeout)
        logger.info(f"Stored LTI launch message {message.nonce} for {self.lti_configuration.consumer_key}")
        return message.nonce

    def get_message(self, nonce):
        """Return the stored LtiMessage, or None if unknown or expired"""
        if not nonce:
            return None
        params = self.cache.get(self._key(nonce))
        if params is None:
            return None
        return LtiMessage(params)

    def delete_message(self, nonce):
        self.cache.delete(self._key(nonce))


def lti_message_store(lti_configuration):
    return LtiMessageStore(lti_configuration)
