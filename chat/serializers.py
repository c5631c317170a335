from rest_framework import serializers

from .sanitizers import sanitize_message


class MessageSerializer(serializers.Serializer):
    id = serializers.CharField()
    message = serializers.CharField()
    sender_id = serializers.CharField()
    sender_name = serializers.CharField(allow_blank=True, default="")
    project_id = serializers.CharField(required=False)
    receiver_id = serializers.CharField(required=False)
    timestamp = serializers.CharField()


class SendMessageSerializer(serializers.Serializer):
    message = serializers.CharField(max_length=4000)

    def validate_message(self, value):
        clean = sanitize_message(value)
        if not clean:
            raise serializers.ValidationError("Message cannot be empty.")
        return clean
