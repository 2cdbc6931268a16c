"""
LTI 1.1 Content-Item Message support.

Builds the JSON-LD content item describing an LTI link and signs the
ContentItemSelection reply with OAuth 1.0 (HMAC-SHA1, body signature) so the
browser can POST it back to the LMS.
"""
import json

from oauthlib import oauth1
from oauthlib.common import urldecode

CONTENT_ITEM_CONTEXT = 'http://purl.imsglobal.org/ctx/lti/v1/ContentItem'
LTI_LINK_MEDIA_TYPE = 'application/vnd.ims.lti.v1.ltilink'


class ContentItemService:
    """Build and sign content items for one LMS return URL"""

    def __init__(self, return_url, consumer_key, shared_secret):
        self.return_url = return_url
        self.consumer_key = consumer_key
        self.shared_secret = shared_secret

    def build_lti_link(self, title, url, text=None, custom=None):
        """A content item graph holding a single LtiLinkItem"""
        item = {
            '@type': 'LtiLinkItem',
            'mediaType': LTI_LINK_MEDIA_TYPE,
            'title': title,
            'url': url,
        }
        if text:
            item['text'] = text
        if custom:
            # LTI custom parameters are strings
            item['custom'] = {str(key): str(value) for key, value in custom.items()}

        return {
            '@context': CONTENT_ITEM_CONTEXT,
            '@graph': [item],
        }

    def unsigned_content(self, content_item, data=None):
        params = {
            'lti_message_type': 'ContentItemSelection',
            'lti_version': 'LTI-1p0',
            'content_items': json.dumps(content_item),
        }
        if data:
            params['data'] = data
        return params

    def signed_content(self, content_item, data=None):
        """
        Form fields for the ContentItemSelection reply, OAuth-signed against
        the return URL. Returns a dict of field name to value.
        """
        client = oauth1.Client(
            self.consumer_key,
            client_secret=self.shared_secret,
            signature_method=oauth1.SIGNATURE_HMAC_SHA1,
            signature_type=oauth1.SIGNATURE_TYPE_BODY,
        )
        _, _, body = client.sign(
            self.return_url,
            http_method='POST',
            body=self.unsigned_content(content_item, data=data),
            headers={'Content-Type': 'application/x-www-form-urlencoded'},
        )
        return dict(urldecode(body))
