from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from .moderation import story_service, photo_service, testimonial_service
from .serializers import (
    StorySerializer, StoryCreateSerializer, StoryUpdateSerializer,
    PhotoSerializer, PhotoCreateSerializer, PhotoUpdateSerializer,
    TestimonialSerializer, TestimonialCreateSerializer, TestimonialUpdateSerializer,
    RejectSerializer, ContentSearchSerializer,
)

PUBLIC_ACTIONS = ('list', 'retrieve', 'is_saluted', 'share')

class ModeratableContentViewSet(viewsets.GenericViewSet):
    """
    Routes for one content kind. Subclasses only pick the service and the
    serializers; every rule lives in the service.
    """
    service = None
    create_serializer_class = None
    update_serializer_class = None

    def get_permissions(self):
        if self.action in PUBLIC_ACTIONS:
            return [permissions.AllowAny()]
        return [permissions.IsAuthenticated()]

    def list(self, request):
        query = ContentSearchSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        queryset = self.service.search(query.validated_data, request.user)
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(queryset, many=True).data)

    def create(self, request):
        serializer = self.create_serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = self.service.create(serializer.validated_data, request.FILES.getlist('files'), request.user)
        return Response(self.get_serializer(item).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        item = self.service.get_single(pk)
        return Response(self.get_serializer(item).data)

    def update(self, request, pk=None):
        serializer = self.update_serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = self.service.update(pk, serializer.validated_data, request.FILES.getlist('files'), request.user)
        return Response(self.get_serializer(item).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk)

    def destroy(self, request, pk=None):
        self.service.remove(pk, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['put'])
    def approve(self, request, pk=None):
        item = self.service.approve(pk, request.user)
        return Response(self.get_serializer(item).data)

    @action(detail=True, methods=['put'])
    def reject(self, request, pk=None):
        serializer = RejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = self.service.reject(pk, request.user, serializer.validated_data['response'])
        return Response(self.get_serializer(item).data)

    @action(detail=True, methods=['put'])
    def salute(self, request, pk=None):
        item = self.service.salute(pk, request.user)
        return Response(self.get_serializer(item).data)

    @action(detail=True, methods=['get'], url_path='is-saluted')
    def is_saluted(self, request, pk=None):
        return Response(self.service.is_saluted(pk, request.user))

    @action(detail=True, methods=['put'])
    def share(self, request, pk=None):
        item = self.service.share(pk)
        return Response(self.get_serializer(item).data)

class StoryViewSet(ModeratableContentViewSet):
    service = story_service
    serializer_class = StorySerializer
    create_serializer_class = StoryCreateSerializer
    update_serializer_class = StoryUpdateSerializer

class PhotoViewSet(ModeratableContentViewSet):
    service = photo_service
    serializer_class = PhotoSerializer
    create_serializer_class = PhotoCreateSerializer
    update_serializer_class = PhotoUpdateSerializer

class TestimonialViewSet(ModeratableContentViewSet):
    service = testimonial_service
    serializer_class = TestimonialSerializer
    create_serializer_class = TestimonialCreateSerializer
    update_serializer_class = TestimonialUpdateSerializer
