import logging

from django.db import IntegrityError, transaction
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from authentication.permissions import is_admin
from memorial.exceptions import Conflict
from notifications import resolver
from notifications.tasks import emit
from uploads.models import File
from uploads.storage import blob_store as default_blob_store
from .models import NextOfKin, Status, Veteran

logger = logging.getLogger(__name__)

NOK_APPROVED_TEXT = "Your NOK request approved"
NOK_REJECTED_TEXT = "Your NOK request rejected by admin"


def ensure_no_approved_next_of_kin(veteran_id, exclude_id=None):
    approved = NextOfKin.objects.filter(veteran_id=veteran_id, status=Status.APPROVED)
    if exclude_id is not None:
        approved = approved.exclude(id=exclude_id)
    if approved.exists():
        raise Conflict("An approved next of kin already exists for this veteran.")


class NextOfKinService:
    def __init__(self, blob_store=None):
        self.blob_store = blob_store or default_blob_store

    def search(self, query, user):
        queryset = NextOfKin.objects.select_related('user', 'veteran').prefetch_related('proofs')
        if not is_admin(user):
            queryset = queryset.filter(user_id=user.id)
        elif query.get('user_id'):
            queryset = queryset.filter(user_id=query['user_id'])
        if query.get('veteran_id'):
            queryset = queryset.filter(veteran_id=query['veteran_id'])
        if query.get('status'):
            queryset = queryset.filter(status=query['status'])
        return queryset

    def get_single(self, pk):
        kin = NextOfKin.objects.select_related('user', 'veteran').prefetch_related('proofs').filter(pk=pk).first()
        if kin is None:
            raise NotFound(f"Next of kin with id: {pk} does not exist!")
        return kin

    def get_for_user(self, pk, user):
        kin = self.get_single(pk)
        if not is_admin(user) and kin.user_id != user.id:
            raise PermissionDenied("You are not allowed to access this next of kin request.")
        return kin

    def create(self, data, files, user):
        if not files:
            raise ValidationError({"files": "At least one proof file is required."})
        veteran = data['veteran']
        ensure_no_approved_next_of_kin(veteran.id)

        uploaded = [self.blob_store.upload(f) for f in files]
        try:
            with transaction.atomic():
                proofs = [
                    File.objects.create(name=meta.original_name, file_url=meta.url, mime_type=meta.mime_type)
                    for meta in uploaded
                ]
                kin = NextOfKin.objects.create(
                    user=user,
                    veteran=veteran,
                    full_name=data['full_name'],
                    email=data['email'],
                    status=Status.PENDING,
                    created_by=user,
                )
                kin.proofs.set(proofs)
        except Exception:
            self.blob_store.delete_urls([meta.url for meta in uploaded])
            raise

        logger.info(f"User {user.id} requested next of kin rights for veteran {veteran.id} (request {kin.id})")
        return self.get_single(kin.id)

    def approve(self, pk, acting_user):
        if not is_admin(acting_user):
            raise PermissionDenied("Only administrators can approve next of kin requests.")

        with transaction.atomic():
            kin = NextOfKin.objects.select_for_update().filter(pk=pk).first()
            if kin is None:
                raise NotFound(f"Next of kin with id: {pk} does not exist!")
            # Serializes concurrent approvals for the same veteran.
            Veteran.objects.select_for_update().filter(pk=kin.veteran_id).first()
            if kin.status == Status.APPROVED:
                return self.get_single(kin.id)

            ensure_no_approved_next_of_kin(kin.veteran_id, exclude_id=kin.id)
            kin.status = Status.APPROVED
            kin.updated_by = acting_user
            try:
                kin.save(update_fields=['status', 'updated_by', 'updated_at'])
            except IntegrityError:
                raise Conflict("An approved next of kin already exists for this veteran.")

            emit(resolver.nok_decided, kin, acting_user.id, NOK_APPROVED_TEXT)

        logger.info(f"Next of kin {kin.id} approved by user {acting_user.id}")
        return self.get_single(kin.id)

    def reject(self, pk, response, acting_user):
        if not is_admin(acting_user):
            raise PermissionDenied("Only administrators can reject next of kin requests.")

        with transaction.atomic():
            kin = NextOfKin.objects.select_for_update().filter(pk=pk).first()
            if kin is None:
                raise NotFound(f"Next of kin with id: {pk} does not exist!")
            kin.status = Status.REJECTED
            kin.response = response
            kin.updated_by = acting_user
            kin.save(update_fields=['status', 'response', 'updated_by', 'updated_at'])

            emit(resolver.nok_decided, kin, acting_user.id, NOK_REJECTED_TEXT)

        logger.info(f"Next of kin {kin.id} rejected by user {acting_user.id}")
        return self.get_single(kin.id)

    def remove(self, pk, acting_user):
        kin = self.get_for_user(pk, acting_user)
        urls = [proof.file_url for proof in kin.proofs.all()]
        with transaction.atomic():
            File.objects.filter(next_of_kins=kin).delete()
            kin.delete()
        self.blob_store.delete_urls(urls)
        logger.info(f"Next of kin {pk} removed by user {acting_user.id}")


next_of_kin_service = NextOfKinService()
