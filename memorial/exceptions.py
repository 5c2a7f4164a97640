from django.utils.translation import gettext_lazy as _
from rest_framework import status
from rest_framework.exceptions import APIException


class BadRequest(APIException):
    """A request that violates a visibility or moderation rule."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = _("The request cannot be fulfilled.")
    default_code = 'bad_request'


class Conflict(APIException):
    """A uniqueness rule would be broken, e.g. a second approved next of kin."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = _("The resource is in a conflicting state.")
    default_code = 'conflict'
