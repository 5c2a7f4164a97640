from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import VeteranViewSet, NextOfKinViewSet

router = DefaultRouter()
router.register(r"veterans", VeteranViewSet, basename="veterans")
router.register(r"next-of-kins", NextOfKinViewSet, basename="next-of-kins")

urlpatterns = [
    path("", include(router.urls)),
]
