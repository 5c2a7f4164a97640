from authentication.permissions import is_admin
from memorial.exceptions import BadRequest
from veterans.models import Status
from veterans.policy import can_manage, managed_veteran_ids


def visibility_status(query, viewer):
    """
    Status a listing is restricted to for ``viewer``. ``None`` means no
    restriction. Anonymous viewers and unfiltered per-veteran listings only
    ever see approved content; other statuses need manage rights.
    """
    veteran_id = query.get('veteran_id')
    requested = query.get('status')
    authenticated = bool(viewer and viewer.is_authenticated)

    if veteran_id:
        if not requested or not authenticated:
            return Status.APPROVED
        if requested != Status.APPROVED and not can_manage(viewer, veteran_id):
            raise BadRequest("User can search only approved veteran content.")
        return requested

    if not authenticated:
        return Status.APPROVED
    own_submissions = query.get('user_id') == viewer.id
    if requested:
        if requested != Status.APPROVED and not (is_admin(viewer) or query.get('review') or own_submissions):
            raise BadRequest("User can search only approved veteran content.")
        return requested
    if is_admin(viewer) or query.get('review'):
        return None
    return Status.APPROVED


def build_filter(query, viewer):
    """Keyword arguments for ``Model.objects.filter`` matching ``query``."""
    if query.get('review') and not (viewer and viewer.is_authenticated):
        raise BadRequest("User must be logged in to make this query.")

    lookup = {}
    status = visibility_status(query, viewer)
    if status:
        lookup['status'] = status
    if query.get('veteran_id'):
        lookup['veteran_id'] = query['veteran_id']
    if query.get('user_id'):
        lookup['created_by_id'] = query['user_id']
    if query.get('review'):
        lookup['veteran_id__in'] = managed_veteran_ids(viewer)
    return lookup
