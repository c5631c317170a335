# chat/throttles.py

from rest_framework.throttling import ScopedRateThrottle


class ChatSendThrottle(ScopedRateThrottle):
    """
    Throttle message sends per user. Views opt in with
    throttle_scope = "chat-send".
    Cache key shape:
      throttle_chat-send_u<uid>
    """
    def get_cache_key(self, request, view):
        # Only throttle POST (send)
        if request.method != "POST":
            return None

        user = getattr(request, "user", None)
        if not user or not user.is_authenticated:
            return None

        return f"throttle_{self.scope}_u{user.uid}"
