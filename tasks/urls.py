from rest_framework.routers import SimpleRouter
from .views import TaskManagementViewSet

router = SimpleRouter()
router.register(r'', TaskManagementViewSet, basename='task')

urlpatterns = router.urls
