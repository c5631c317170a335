# chat/urls.py

from django.urls import path
from .views import DirectMessagesView, DirectStreamView, ProjectMessagesView, ProjectStreamView

urlpatterns = [
    path('projects/<str:project_id>/messages/', ProjectMessagesView.as_view(), name='project-chat-messages'),
    path('projects/<str:project_id>/stream/', ProjectStreamView.as_view(), name='project-chat-stream'),
    path('direct/<str:receiver_id>/messages/', DirectMessagesView.as_view(), name='direct-chat-messages'),
    path('direct/<str:receiver_id>/stream/', DirectStreamView.as_view(), name='direct-chat-stream'),
]
