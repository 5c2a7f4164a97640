from rest_framework import generics, mixins, permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from memorial.utils import api_response
from .models import Notification, NotificationPreference
from .serializers import NotificationSerializer, MarkAsReadSerializer, NotificationPreferenceSerializer

class NotificationViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    serializer_class = NotificationSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        requested = self.request.query_params.get('status') or Notification.Status.NEW
        if requested not in Notification.Status.values:
            raise ValidationError({"status": f"'{requested}' is not a valid notification status."})
        return Notification.objects.filter(user=self.request.user, status=requested)

    @action(detail=False, methods=['put'], url_path='mark-read')
    def mark_as_read(self, request):
        serializer = MarkAsReadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        ids = serializer.validated_data['ids']
        updated = 0
        if ids:
            updated = Notification.objects.filter(user=request.user, id__in=ids).update(status=Notification.Status.READ)
        return api_response(True, status.HTTP_200_OK, "Notifications marked as read.", {"updated": updated})

class NotificationPreferenceView(generics.RetrieveUpdateAPIView):
    serializer_class = NotificationPreferenceSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_object(self):
        return NotificationPreference.for_user(self.request.user)
