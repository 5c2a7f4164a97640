from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from authentication.permissions import IsAdminRoleOrReadOnly
from .models import Veteran
from .serializers import (
    VeteranSerializer,
    NextOfKinSerializer,
    NextOfKinCreateSerializer,
    NextOfKinRejectSerializer,
    NextOfKinSearchSerializer,
)
from .services import next_of_kin_service

class VeteranViewSet(viewsets.ModelViewSet):
    queryset = Veteran.objects.all()
    serializer_class = VeteranSerializer
    permission_classes = [IsAdminRoleOrReadOnly]

class NextOfKinViewSet(viewsets.GenericViewSet):
    serializer_class = NextOfKinSerializer
    permission_classes = [permissions.IsAuthenticated]
    service = next_of_kin_service

    def list(self, request):
        query = NextOfKinSearchSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        queryset = self.service.search(query.validated_data, request.user)
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(queryset, many=True).data)

    def create(self, request):
        serializer = NextOfKinCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        kin = self.service.create(serializer.validated_data, request.FILES.getlist('files'), request.user)
        return Response(self.get_serializer(kin).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        kin = self.service.get_for_user(pk, request.user)
        return Response(self.get_serializer(kin).data)

    def destroy(self, request, pk=None):
        self.service.remove(pk, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['put'])
    def approve(self, request, pk=None):
        kin = self.service.approve(pk, request.user)
        return Response(self.get_serializer(kin).data)

    @action(detail=True, methods=['put'])
    def reject(self, request, pk=None):
        serializer = NextOfKinRejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        kin = self.service.reject(pk, serializer.validated_data['response'], request.user)
        return Response(self.get_serializer(kin).data)
