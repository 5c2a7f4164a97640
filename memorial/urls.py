from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static
from django.http import HttpResponse

def index(request):
    return HttpResponse("Welcome to the Memorial API!")

urlpatterns = [
    path('', index),
    path('admin/', admin.site.urls),
    path('api/', include('veterans.urls')),
    path('api/', include('posts.urls')),
    path('api/notifications/', include('notifications.urls')),
]


if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
