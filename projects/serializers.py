from rest_framework import serializers


def unique_ids(values):
    """Member/assignee lists are sets; keep first-seen order for display."""
    seen = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


class ProjectSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    description = serializers.CharField(allow_blank=True, default="")
    members = serializers.ListField(child=serializers.CharField(), default=list)
    member_count = serializers.SerializerMethodField()
    created_by = serializers.CharField(allow_null=True, default=None)
    created_at = serializers.CharField(allow_null=True, default=None)
    updated_at = serializers.CharField(allow_null=True, default=None)

    def get_member_count(self, obj):
        return len(obj.get("members") or [])


class ProjectInputSerializer(serializers.Serializer):
    name = serializers.CharField()
    description = serializers.CharField()
    members = serializers.ListField(child=serializers.CharField(), default=list)

    def validate_members(self, value):
        return unique_ids(value)
