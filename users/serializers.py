from rest_framework import serializers

from core.constants import (
    ACCOUNT_STATUS_CHOICES,
    ROLE_CHOICES,
    ROLE_USER,
    THEME_CHOICES,
)


class ProfileSerializer(serializers.Serializer):
    uid = serializers.CharField(source="id")
    display_name = serializers.CharField()
    email = serializers.CharField(allow_blank=True)
    photo_url = serializers.CharField(allow_blank=True, default="")
    role = serializers.CharField()
    status = serializers.CharField()
    created_at = serializers.CharField(allow_null=True, default=None)
    settings = serializers.DictField(default=dict)


class CreateUserSerializer(serializers.Serializer):
    display_name = serializers.CharField()
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)
    role = serializers.ChoiceField(choices=ROLE_CHOICES, default=ROLE_USER)


class UpdateUserSerializer(serializers.Serializer):
    display_name = serializers.CharField()
    role = serializers.ChoiceField(choices=ROLE_CHOICES)
    status = serializers.ChoiceField(choices=ACCOUNT_STATUS_CHOICES)


class SettingsSerializer(serializers.Serializer):
    display_name = serializers.CharField()
    email = serializers.EmailField(required=False, allow_blank=True)
    new_password = serializers.CharField(required=False, allow_blank=True, write_only=True, trim_whitespace=False)
    # Omitted preferences keep their saved values
    email_notifications = serializers.BooleanField(required=False)
    task_reminders = serializers.BooleanField(required=False)
    theme = serializers.ChoiceField(choices=THEME_CHOICES, required=False)
