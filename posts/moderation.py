"""
Moderation lifecycle shared by every kind of user submission.

Each content kind is described by a :class:`ContentKind` and served by one
:class:`ModerationService` instance. Items start ``pending`` and move once to
``approved`` or ``rejected``; only approved items can be saluted or shared.
"""
import logging
from dataclasses import dataclass, field

from django.db import transaction
from django.db.models import F
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from memorial.exceptions import BadRequest
from notifications import resolver
from notifications.tasks import emit
from uploads.models import File
from uploads.storage import blob_store as default_blob_store
from veterans.models import Status
from veterans.policy import can_manage
from .filters import build_filter
from .models import Photo, PostSalute, PostType, Story, Testimonial

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContentKind:
    model: type
    post_type: str
    label: str
    fields: tuple = ()
    file_field: str = None
    sort_columns: tuple = field(default=("id", "veteran_id", "title", "status", "created_at"))


STORY = ContentKind(Story, PostType.STORY, "story", fields=("title", "text"),
                    sort_columns=("id", "veteran_id", "title", "text", "status", "created_at"))
PHOTO = ContentKind(Photo, PostType.PHOTO, "photo", fields=("title",), file_field="photo_file")
TESTIMONIAL = ContentKind(Testimonial, PostType.TESTIMONIAL, "testimonial", fields=("title", "text"))


class ModerationService:
    def __init__(self, kind, blob_store=None):
        self.kind = kind
        self.blob_store = blob_store or default_blob_store

    @property
    def model(self):
        return self.kind.model

    def _queryset(self):
        queryset = self.model.objects.select_related('veteran', 'created_by', 'updated_by')
        if self.kind.file_field:
            queryset = queryset.select_related(self.kind.file_field)
        return queryset

    def _get(self, pk, for_update=False):
        queryset = self.model.objects.select_for_update() if for_update else self._queryset()
        item = queryset.filter(pk=pk).first()
        if item is None:
            raise NotFound(f"{self.kind.label.capitalize()} with id: {pk} does not exist!")
        return item

    def _increment(self, item, counter):
        setattr(item, counter, F(counter) + 1)
        item.save(update_fields=[counter])
        item.refresh_from_db(fields=[counter])
        return item

    def _ensure_can_manage(self, user, item):
        if not can_manage(user, item.veteran_id):
            raise PermissionDenied("User is not allowed to manage the veteran.")

    def _ensure_can_edit(self, user, item):
        if item.created_by_id is not None and item.created_by_id == user.id:
            return
        self._ensure_can_manage(user, item)

    def _stored_file_url(self, item):
        if not self.kind.file_field:
            return None
        stored = getattr(item, self.kind.file_field)
        return stored.file_url if stored else None

    def initial_status(self, requested, creator, veteran_id):
        """Creators may only publish directly when they manage the veteran."""
        if requested == Status.APPROVED and can_manage(creator, veteran_id):
            return Status.APPROVED
        if requested and requested != Status.PENDING:
            logger.info(f"User {creator.id} cannot create an {requested} {self.kind.label}; storing it as pending.")
        return Status.PENDING

    def search(self, query, viewer):
        lookup = build_filter(query, viewer)
        sort_column = query.get('sort_column') or 'id'
        if sort_column not in self.kind.sort_columns:
            raise ValidationError({"sort_column": f"Cannot sort {self.kind.label} by '{sort_column}'."})
        prefix = '-' if query.get('sort_order') == 'desc' else ''
        return self._queryset().filter(**lookup).order_by(f"{prefix}{sort_column}")

    def get_single(self, pk):
        item = self._get(pk)
        return self._increment(item, 'view_count')

    def create(self, data, files, creator):
        veteran = data['veteran']
        values = {name: data[name] for name in self.kind.fields if name in data}
        status = self.initial_status(data.get('status'), creator, veteran.id)

        meta = None
        if self.kind.file_field:
            if not files or len(files) != 1:
                raise ValidationError({"files": f"Exactly one file is required to create a {self.kind.label}."})
            meta = self.blob_store.upload(files[0])

        try:
            with transaction.atomic():
                if meta is not None:
                    values[self.kind.file_field] = File.objects.create(
                        name=meta.name, file_url=meta.url, mime_type=meta.mime_type
                    )
                item = self.model.objects.create(veteran=veteran, created_by=creator, status=status, **values)
                emit(resolver.post_created, veteran.id, creator.id, str(self.kind.post_type))
        except Exception:
            if meta is not None:
                self.blob_store.delete_url(meta.url)
            raise

        logger.info(f"User {creator.id} created {self.kind.label} {item.id} for veteran {veteran.id} as {status}")
        return self._get(item.id)

    def update(self, pk, data, files, user):
        if self.kind.file_field and files and len(files) != 1:
            raise ValidationError({"files": f"Only one file can replace the {self.kind.label} file."})

        replaced_url = None
        meta = None
        try:
            with transaction.atomic():
                item = self._get(pk, for_update=True)
                self._ensure_can_edit(user, item)
                if item.status != Status.PENDING and not can_manage(user, item.veteran_id):
                    raise BadRequest(f"Only pending {self.kind.label} submissions can be edited.")

                changed = [name for name in self.kind.fields if name in data]
                for name in changed:
                    setattr(item, name, data[name])

                if self.kind.file_field and files:
                    replaced_url = self._stored_file_url(item)
                    meta = self.blob_store.upload(files[0])
                    setattr(item, self.kind.file_field, File.objects.create(
                        name=meta.name, file_url=meta.url, mime_type=meta.mime_type
                    ))
                    changed.append(self.kind.file_field)

                item.updated_by = user
                item.save(update_fields=changed + ['updated_by', 'updated_at'])
                if replaced_url:
                    File.objects.filter(file_url=replaced_url).delete()
        except Exception:
            if meta is not None:
                self.blob_store.delete_url(meta.url)
            raise

        if replaced_url:
            self.blob_store.delete_url(replaced_url)
        return self._get(pk)

    def remove(self, pk, user):
        item = self._get(pk)
        self._ensure_can_edit(user, item)
        stored_url = self._stored_file_url(item)
        with transaction.atomic():
            item.delete()
            if stored_url:
                File.objects.filter(file_url=stored_url).delete()
        if stored_url:
            self.blob_store.delete_url(stored_url)
        logger.info(f"{self.kind.label.capitalize()} {pk} removed by user {user.id}")

    def approve(self, pk, user):
        with transaction.atomic():
            item = self._get(pk, for_update=True)
            self._ensure_can_manage(user, item)
            if item.status == Status.REJECTED:
                raise BadRequest(f"A rejected {self.kind.label} cannot be approved.")
            if item.status == Status.APPROVED:
                return self._get(pk)

            emit(resolver.post_approved, item.veteran_id, item.created_by_id, user.id, str(self.kind.post_type))
            item.status = Status.APPROVED
            item.updated_by = user
            item.save(update_fields=['status', 'updated_by', 'updated_at'])

        logger.info(f"{self.kind.label.capitalize()} {pk} approved by user {user.id}")
        return self._get(pk)

    def reject(self, pk, user, response):
        with transaction.atomic():
            item = self._get(pk, for_update=True)
            self._ensure_can_manage(user, item)
            if item.status == Status.APPROVED:
                raise BadRequest(f"An approved {self.kind.label} cannot be rejected.")

            item.status = Status.REJECTED
            item.response = response or ""
            item.updated_by = user
            item.save(update_fields=['status', 'response', 'updated_by', 'updated_at'])

        logger.info(f"{self.kind.label.capitalize()} {pk} rejected by user {user.id}")
        return self._get(pk)

    def _get_approved(self, pk, action):
        item = self._get(pk)
        if item.status != Status.APPROVED:
            raise BadRequest(f"Only approved content can be {action}.")
        return item

    def salute(self, pk, user):
        item = self._get_approved(pk, "saluted")
        with transaction.atomic():
            # The ledger row is the gate: only the request that inserts it counts.
            _, created = PostSalute.objects.get_or_create(
                user=user, post_type=self.kind.post_type, post_id=item.pk
            )
            if created:
                self._increment(item, 'salute_count')
        return item

    def is_saluted(self, pk, user):
        item = self._get(pk)
        if not user or not user.is_authenticated:
            return {"saluted": False}
        saluted = PostSalute.objects.filter(user=user, post_type=self.kind.post_type, post_id=item.pk).exists()
        return {"saluted": saluted}

    def share(self, pk):
        item = self._get_approved(pk, "shared")
        return self._increment(item, 'share_count')


story_service = ModerationService(STORY)
photo_service = ModerationService(PHOTO)
testimonial_service = ModerationService(TESTIMONIAL)
