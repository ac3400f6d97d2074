# chats/urls.py

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from chats.views import ChatViewSet

router = SimpleRouter()
router.register(r"", ChatViewSet, basename="chat")

urlpatterns = [
    path("", include(router.urls)),
]
