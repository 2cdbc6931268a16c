"""
Views for the LTI app.
"""
import logging

from django.core.exceptions import PermissionDenied
from django.shortcuts import redirect
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt
from oauthlib.oauth1 import SignatureOnlyEndpoint

from .message_store import LtiMessage, lti_message_store
from .validators import LtiRequestValidator

logger = logging.getLogger(__name__)


@method_decorator(csrf_exempt, name='dispatch')
class LtiLaunchView(View):
    """
    Entry point an LMS POSTs to when launching the tool.

    Verifies the OAuth signature, keeps the launch message for a later
    content-item reply and sends the teacher to the organization page.
    """
    http_method_names = ['post']

    def post(self, request, *args, **kwargs):
        # Read the raw body before request.POST consumes the stream
        try:
            body = request.body.decode('utf-8')
        except UnicodeDecodeError as e:
            logger.warning("Rejected LTI launch with a body that is not UTF-8")
            raise PermissionDenied("Invalid LTI launch body.") from e

        endpoint = SignatureOnlyEndpoint(LtiRequestValidator())
        is_valid, oauth_request = endpoint.validate_request(
            request.build_absolute_uri(),
            http_method='POST',
            body=body,
            headers={'Content-Type': request.content_type or 'application/x-www-form-urlencoded'},
        )
        if not is_valid:
            logger.warning(f"Rejected LTI launch with invalid signature from {request.POST.get('oauth_consumer_key')}")
            raise PermissionDenied("Invalid LTI launch signature.")

        lti_configuration = oauth_request.lti_configuration
        message = LtiMessage(request.POST.items())
        nonce = lti_message_store(lti_configuration).save_message(message)
        request.session['lti_nonce'] = nonce

        logger.info(
            f"LTI launch ({message.message_type}) for organization {lti_configuration.organization.slug}"
        )
        return redirect(lti_configuration.organization)
