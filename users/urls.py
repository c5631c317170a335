# users/urls.py

from django.urls import path, include
from rest_framework.routers import SimpleRouter
from .views import UserManagementViewSet, MySettingsView, ThemeToggleView

router = SimpleRouter()
router.register(r'', UserManagementViewSet, basename='user')

urlpatterns = [
    path('me/settings/', MySettingsView.as_view(), name='my-settings'),
    path('me/theme/toggle/', ThemeToggleView.as_view(), name='theme-toggle'),
    path('', include(router.urls)),
]
