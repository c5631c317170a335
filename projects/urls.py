from rest_framework.routers import SimpleRouter
from .views import ProjectManagementViewSet

router = SimpleRouter()
router.register(r'', ProjectManagementViewSet, basename='project')

urlpatterns = router.urls
