import json
import time

from django.core.cache import cache
from django.test import TestCase
from django.urls import reverse
from oauthlib import oauth1
from oauthlib.oauth1 import SignatureOnlyEndpoint
from apps.lti.content_item import ContentItemService
from apps.lti.message_store import LtiMessage, LtiMessageStore
from apps.lti.validators import LtiRequestValidator
from apps.organizations.models import LtiConfiguration, Organization
from django.contrib.auth.models import User

FORM_CONTENT_TYPE = 'application/x-www-form-urlencoded'


def sign_launch(consumer_key, shared_secret, params, url='http://testserver/lti/launch/',
                nonce=None, timestamp=None):
    """Form-encoded body an LMS would POST to launch the tool"""
    client = oauth1.Client(
        consumer_key,
        client_secret=shared_secret,
        signature_method=oauth1.SIGNATURE_HMAC_SHA1,
        signature_type=oauth1.SIGNATURE_TYPE_BODY,
        nonce=nonce,
        timestamp=timestamp,
    )
    _, _, body = client.sign(url, http_method='POST', body=params, headers={'Content-Type': FORM_CONTENT_TYPE})
    return body


CONTENT_ITEM_LAUNCH = {
    'lti_message_type': 'ContentItemSelectionRequest',
    'lti_version': 'LTI-1p0',
    'content_item_return_url': 'https://lms.example.com/return',
    'data': 'opaque-lms-state',
    'context_id': 'course-42',
}


class LtiTestMixin:

    def setUp(self):
        cache.clear()
        self.organization = Organization.objects.create(title='CS 101', slug='cs-101')
        self.configuration = LtiConfiguration.objects.create(
            organization=self.organization,
            consumer_key='lms-key',
            shared_secret='lms-secret',
        )


class ContentItemServiceTestCase(LtiTestMixin, TestCase):
    """Tests for building and signing content-item replies"""

    def setUp(self):
        super().setUp()
        self.service = ContentItemService('https://lms.example.com/return', 'lms-key', 'lms-secret')

    def test_build_lti_link(self):
        content_item = self.service.build_lti_link(
            'HW 1', 'https://classroom.test/lti/launch/', custom={'assignment_id': 5}
        )
        self.assertEqual(content_item['@context'], 'http://purl.imsglobal.org/ctx/lti/v1/ContentItem')
        item = content_item['@graph'][0]
        self.assertEqual(item['@type'], 'LtiLinkItem')
        self.assertEqual(item['mediaType'], 'application/vnd.ims.lti.v1.ltilink')
        self.assertEqual(item['title'], 'HW 1')
        self.assertEqual(item['custom'], {'assignment_id': '5'})
        self.assertNotIn('text', item)

    def test_unsigned_content(self):
        content_item = self.service.build_lti_link('HW 1', 'https://classroom.test/lti/launch/')
        params = self.service.unsigned_content(content_item, data='state')
        self.assertEqual(params['lti_message_type'], 'ContentItemSelection')
        self.assertEqual(params['lti_version'], 'LTI-1p0')
        self.assertEqual(json.loads(params['content_items']), content_item)
        self.assertEqual(params['data'], 'state')

    def test_signed_content_verifies_with_shared_secret(self):
        """Test the LMS can verify the reply against the consumer credentials"""
        content_item = self.service.build_lti_link('HW 1', 'https://classroom.test/lti/launch/')
        payload = self.service.signed_content(content_item, data='state')

        self.assertEqual(payload['oauth_consumer_key'], 'lms-key')
        self.assertEqual(payload['oauth_signature_method'], 'HMAC-SHA1')
        self.assertIn('oauth_signature', payload)

        endpoint = SignatureOnlyEndpoint(LtiRequestValidator())
        is_valid, _ = endpoint.validate_request(
            'https://lms.example.com/return',
            http_method='POST',
            body=payload,
            headers={'Content-Type': FORM_CONTENT_TYPE},
        )
        self.assertTrue(is_valid)

    def test_signed_content_fails_with_wrong_secret(self):
        service = ContentItemService('https://lms.example.com/return', 'lms-key', 'not-the-secret')
        payload = service.signed_content(service.build_lti_link('HW 1', 'https://classroom.test/'))

        endpoint = SignatureOnlyEndpoint(LtiRequestValidator())
        is_valid, _ = endpoint.validate_request(
            'https://lms.example.com/return',
            http_method='POST',
            body=payload,
            headers={'Content-Type': FORM_CONTENT_TYPE},
        )
        self.assertFalse(is_valid)


class LtiMessageStoreTestCase(LtiTestMixin, TestCase):
    """Tests for the cache backed launch message store"""

    def setUp(self):
        super().setUp()
        self.store = LtiMessageStore(self.configuration)

    def test_save_and_get(self):
        message = LtiMessage({'oauth_nonce': 'n1', **CONTENT_ITEM_LAUNCH})
        self.assertEqual(self.store.save_message(message), 'n1')

        stored = self.store.get_message('n1')
        self.assertTrue(stored.is_content_item_request)
        self.assertEqual(stored.content_item_return_url, 'https://lms.example.com/return')
        self.assertEqual(stored.data, 'opaque-lms-state')

    def test_messages_scoped_to_consumer_key(self):
        self.store.save_message(LtiMessage({'oauth_nonce': 'n1'}))
        other_organization = Organization.objects.create(title='Other', slug='other')
        other = LtiConfiguration.objects.create(
            organization=other_organization, consumer_key='other-key', shared_secret='x'
        )
        self.assertIsNone(LtiMessageStore(other).get_message('n1'))

    def test_unknown_and_blank_nonce(self):
        self.assertIsNone(self.store.get_message('missing'))
        self.assertIsNone(self.store.get_message(None))

    def test_delete_message(self):
        self.store.save_message(LtiMessage({'oauth_nonce': 'n1'}))
        self.store.delete_message('n1')
        self.assertIsNone(self.store.get_message('n1'))

    def test_message_without_nonce_rejected(self):
        with self.assertRaises(ValueError):
            self.store.save_message(LtiMessage({}))


class LtiLaunchViewTestCase(LtiTestMixin, TestCase):
    """Tests for the signed launch endpoint"""

    def setUp(self):
        super().setUp()
        self.url = reverse('lti:launch')

    def launch(self, body):
        return self.client.post(self.url, data=body, content_type=FORM_CONTENT_TYPE)

    def test_valid_launch_stores_message(self):
        body = sign_launch('lms-key', 'lms-secret', CONTENT_ITEM_LAUNCH)
        with self.assertLogs('apps.lti.views', level='INFO'):
            response = self.launch(body)

        self.assertRedirects(response, self.organization.get_absolute_url(), fetch_redirect_response=False)

        nonce = self.client.session['lti_nonce']
        message = LtiMessageStore(self.configuration).get_message(nonce)
        self.assertEqual(message.content_item_return_url, 'https://lms.example.com/return')
        self.assertEqual(message.context_id, 'course-42')

    def test_bad_secret_rejected(self):
        body = sign_launch('lms-key', 'wrong-secret', CONTENT_ITEM_LAUNCH)
        with self.assertLogs('apps.lti.views', level='WARNING'):
            response = self.launch(body)
        self.assertEqual(response.status_code, 403)
        self.assertNotIn('lti_nonce', self.client.session)

    def test_unknown_consumer_rejected(self):
        body = sign_launch('who-knows', 'lms-secret', CONTENT_ITEM_LAUNCH)
        with self.assertLogs('apps.lti.views', level='WARNING'):
            response = self.launch(body)
        self.assertEqual(response.status_code, 403)

    def test_replayed_launch_rejected(self):
        body = sign_launch('lms-key', 'lms-secret', CONTENT_ITEM_LAUNCH)
        self.assertEqual(self.launch(body).status_code, 302)
        with self.assertLogs('apps.lti.views', level='WARNING'):
            self.assertEqual(self.launch(body).status_code, 403)

    def test_forged_launch_spends_nonce(self):
        """Test the nonce is recorded before the signature is checked"""
        timestamp = str(int(time.time()))
        forged = sign_launch('lms-key', 'wrong-secret', CONTENT_ITEM_LAUNCH,
                             nonce='launch-nonce-1', timestamp=timestamp)
        genuine = sign_launch('lms-key', 'lms-secret', CONTENT_ITEM_LAUNCH,
                              nonce='launch-nonce-1', timestamp=timestamp)

        with self.assertLogs('apps.lti.views', level='WARNING'):
            self.assertEqual(self.launch(forged).status_code, 403)
            self.assertEqual(self.launch(genuine).status_code, 403)

    def test_body_not_utf8_rejected(self):
        with self.assertLogs('apps.lti.views', level='WARNING'):
            response = self.client.post(self.url, data=b'oauth_consumer_key=\xff\xfe', content_type=FORM_CONTENT_TYPE)
        self.assertEqual(response.status_code, 403)
        self.assertNotIn('lti_nonce', self.client.session)

    def test_get_not_allowed(self):
        self.assertEqual(self.client.get(self.url).status_code, 405)


class LtiRequestValidatorTestCase(LtiTestMixin, TestCase):

    def test_client_secret_lookup(self):
        validator = LtiRequestValidator()
        self.assertEqual(validator.get_client_secret('lms-key', object()), 'lms-secret')
        self.assertEqual(validator.get_client_secret('unknown', object()), validator.dummy_secret)

    def test_nonce_only_accepted_once(self):
        validator = LtiRequestValidator()
        self.assertTrue(validator.validate_timestamp_and_nonce('lms-key', '1', 'abc', None))
        self.assertFalse(validator.validate_timestamp_and_nonce('lms-key', '1', 'abc', None))
