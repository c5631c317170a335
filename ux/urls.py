from django.urls import path
from ux.views.analytics import AnalyticsView
from ux.views.dashboard import UserDashboardView
from ux.views.project_detail import ProjectDetailView, TaskStatusView
from ux.views.routes import RouteResolveView

urlpatterns = [
    path("analytics/", AnalyticsView.as_view(), name="ux-analytics"),
    path("me/dashboard/", UserDashboardView.as_view(), name="ux-user-dashboard"),
    path("projects/<str:project_id>/", ProjectDetailView.as_view(), name="ux-project-detail"),
    path(
        "projects/<str:project_id>/tasks/<str:task_id>/status/",
        TaskStatusView.as_view(),
        name="ux-task-status",
    ),
    path("routes/resolve/", RouteResolveView.as_view(), name="ux-route-resolve"),
]
