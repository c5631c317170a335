# authx/session.py
"""
Session context: the single owner of "who is signed in" for one caller.

It subscribes to its identity provider's state-change stream on
``start()`` and releases it on ``close()``. Every sign-in event resolves
the caller's profile record, creating it on first sign-in.
"""
import logging

from core.backends import get_identity_provider
from core.constants import COLLECTION_USERS
from users.services import ensure_profile

logger = logging.getLogger("taskhub.auth")


class SessionProvider:
    def __init__(self, store, identity=None):
        self.store = store
        self._identity = identity
        self.session = None
        self.profile = None
        self.loading = True
        self._subscription = None

    @property
    def identity(self):
        if self._identity is None:
            self._identity = get_identity_provider()
        return self._identity

    # -- lifecycle ----------------------------------------------------

    def start(self):
        if self._subscription is None:
            self._subscription = self.identity.on_auth_state_change(self._on_auth_state_change)
        return self

    def close(self):
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def __enter__(self):
        return self.start()

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def _on_auth_state_change(self, event, session):
        self.session = session
        self.profile = ensure_profile(self.store, session) if session is not None else None
        self.loading = False

    def _sync(self, session, display_name=None):
        # Listener already handled it when subscribed; otherwise catch up here
        if self.session != session or self.profile is None:
            self.session = session
            self.profile = ensure_profile(self.store, session, display_name=display_name)
            self.loading = False
        return session

    def adopt(self, session):
        """
        Take over a session restored from a verified access token. Only an
        existing profile is loaded; profiles are created on sign-in, so a
        deleted account stays deleted. Returns None when there is none.
        """
        self.session = session
        self.profile = self.store.get(COLLECTION_USERS, session.uid)
        self.loading = False
        return self.profile

    # -- operations (errors from the identity provider propagate) -----

    def login(self, email, password):
        session = self.identity.sign_in_with_password(email, password)
        return self._sync(session)

    def signup(self, email, password, display_name):
        session = self.identity.sign_up(email, password, display_name=display_name)
        return self._sync(session, display_name=display_name)

    def login_with_google(self, id_token):
        session = self.identity.sign_in_with_google(id_token)
        return self._sync(session)

    def logout(self):
        token = self.session.access_token if self.session is not None else ""
        self.identity.sign_out(token)
        self.session = None
        self.profile = None
        self.loading = False
