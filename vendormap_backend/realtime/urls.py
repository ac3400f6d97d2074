# realtime/urls.py

from django.urls import path

from realtime.views import RealtimePollView

urlpatterns = [
    path("<str:topic>/", RealtimePollView.as_view(), name="realtime-poll"),
]
