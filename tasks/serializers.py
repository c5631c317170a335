from rest_framework import serializers

from core.constants import (
    PRIORITY_CHOICES,
    PRIORITY_MEDIUM,
    TASK_COMPLETED,
    TASK_IN_PROGRESS,
)
from projects.serializers import unique_ids


class TaskSerializer(serializers.Serializer):
    id = serializers.CharField()
    title = serializers.CharField()
    description = serializers.CharField(allow_blank=True, default="")
    project_id = serializers.CharField(allow_null=True, default=None)
    project_name = serializers.SerializerMethodField()
    assigned_to = serializers.ListField(child=serializers.CharField(), default=list)
    status = serializers.CharField()
    priority = serializers.CharField()
    due_date = serializers.CharField(allow_null=True, default=None)
    created_at = serializers.CharField(allow_null=True, default=None)
    updated_at = serializers.CharField(allow_null=True, default=None)
    completed_at = serializers.CharField(allow_null=True, default=None)

    def get_project_name(self, obj):
        names = self.context.get("project_names")
        if names is None:
            return None
        return names.get(obj.get("project_id"))


class TaskInputSerializer(serializers.Serializer):
    title = serializers.CharField()
    description = serializers.CharField()
    project_id = serializers.CharField()
    assigned_to = serializers.ListField(child=serializers.CharField(), default=list)
    priority = serializers.ChoiceField(choices=PRIORITY_CHOICES, default=PRIORITY_MEDIUM)
    due_date = serializers.DateField()

    def validate_assigned_to(self, value):
        return unique_ids(value)


class BulkAssignSerializer(serializers.Serializer):
    task_ids = serializers.ListField(child=serializers.CharField(), min_length=1)
    user_ids = serializers.ListField(child=serializers.CharField(), min_length=1)

    def validate_task_ids(self, value):
        return unique_ids(value)

    def validate_user_ids(self, value):
        return unique_ids(value)


class StatusChangeSerializer(serializers.Serializer):
    # The two forward moves a member can make from the project screen
    status = serializers.ChoiceField(choices=[
        (TASK_IN_PROGRESS, "In Progress"),
        (TASK_COMPLETED, "Completed"),
    ])
