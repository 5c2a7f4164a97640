from django.urls import path, include
from rest_framework.routers import SimpleRouter
from .views import StoryViewSet, PhotoViewSet, TestimonialViewSet

router = SimpleRouter()
router.register(r"stories", StoryViewSet, basename="stories")
router.register(r"photos", PhotoViewSet, basename="photos")
router.register(r"testimonials", TestimonialViewSet, basename="testimonials")

urlpatterns = [
    path("", include(router.urls)),
]
