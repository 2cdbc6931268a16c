from django.conf import settings
from django.http import HttpResponseRedirect


class HttpResponseAppSchemeRedirect(HttpResponseRedirect):
    """
    Redirect to the companion desktop app.

    HttpResponseRedirect only allows http, https and ftp targets; this
    response also allows the configured assistant URL scheme.
    """

    @property
    def allowed_schemes(self):
        return ['http', 'https', settings.CLASSROOM_ASSISTANT_SCHEME]
