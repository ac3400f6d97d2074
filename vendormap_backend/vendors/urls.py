# vendors/urls.py

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from vendors.views import VendorPresenceView, VendorViewSet

router = SimpleRouter()
router.register(r"", VendorViewSet, basename="vendor")

urlpatterns = [
    path("", include(router.urls)),
]

# Mounted twice by backend.urls: under /api/ and at the site root.
presence_urlpatterns = [
    path("vendor/<str:vendor_id>/online", VendorPresenceView.as_view()),
]
