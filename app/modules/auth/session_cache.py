"""
Session cache: a local mirror of the signed-in user, their profile and their
session tokens, stored as JSON strings in a key-value store.

Entries carry a single ``last_sync`` stamp and go stale after a fixed window
(24 hours by default). A stale entry is cleared on read. The cache only saves a
round trip to Supabase Auth; Supabase stays the source of truth.
"""
import hashlib
import json
import logging
import time
from typing import Any, Callable, Dict, MutableMapping, Optional

from app.config import settings
from app.modules.auth.schemas import StoredAuthState

logger = logging.getLogger(__name__)

STORAGE_KEYS = {
    "user": "contentgen_user",
    "user_profile": "contentgen_user_profile",
    "session": "contentgen_session",
    "last_sync": "contentgen_last_sync",
}

# Process-wide default store, shared by every SessionCache that is not given one
_SESSION_STORE: Dict[str, str] = {}


def session_namespace(access_token: str) -> str:
    return hashlib.sha256(access_token.encode()).hexdigest()


def is_expired(timestamp: float, now: float, ttl_hours: Optional[int] = None) -> bool:
    """True when more than ``ttl_hours`` have passed since ``timestamp`` (seconds)."""
    if ttl_hours is None:
        ttl_hours = settings.session_cache_ttl_hours
    return now - timestamp > ttl_hours * 60 * 60


def _safe_json_loads(data: Optional[str]) -> Optional[Any]:
    if not data:
        return None
    try:
        return json.loads(data)
    except ValueError as e:
        logger.warning(f"Failed to parse stored data: {e}")
        return None


def _safe_json_dumps(data: Any) -> Optional[str]:
    try:
        return json.dumps(data, default=str)
    except (TypeError, ValueError) as e:
        logger.warning(f"Failed to stringify data: {e}")
        return None


def prune_expired(store: MutableMapping[str, str], now: float, ttl_hours: Optional[int] = None) -> int:
    """Drop every namespace whose last_sync is stale or unreadable. Returns namespaces removed."""
    prefix = STORAGE_KEYS["last_sync"] + ":"
    stale = []
    for key, value in list(store.items()):
        if not key.startswith(prefix):
            continue
        try:
            expired = is_expired(float(value), now, ttl_hours)
        except ValueError:
            expired = True
        if expired:
            stale.append(key[len(prefix):])
    for namespace in stale:
        for base in STORAGE_KEYS.values():
            store.pop(f"{base}:{namespace}", None)
    if stale:
        logger.debug(f"Pruned {len(stale)} stale session cache entries")
    return len(stale)


class SessionCache:
    def __init__(
        self,
        namespace: str,
        store: Optional[MutableMapping[str, str]] = None,
        clock: Callable[[], float] = time.time,
        ttl_hours: Optional[int] = None,
    ):
        self.namespace = namespace
        self.store = _SESSION_STORE if store is None else store
        self.clock = clock
        self.ttl_hours = ttl_hours if ttl_hours is not None else settings.session_cache_ttl_hours

    @classmethod
    def for_token(cls, access_token: str, **kwargs) -> "SessionCache":
        return cls(session_namespace(access_token), **kwargs)

    def _key(self, name: str) -> str:
        return f"{STORAGE_KEYS[name]}:{self.namespace}"

    def _last_sync(self) -> Optional[float]:
        raw = self.store.get(self._key("last_sync"))
        if raw is None:
            return None
        try:
            return float(raw)
        except ValueError:
            return None

    def _stamp(self, timestamp: Optional[float] = None) -> None:
        self.store[self._key("last_sync")] = str(self.clock() if timestamp is None else timestamp)

    def _read_fresh(self, name: str, clear: Callable[[], None]) -> Optional[Any]:
        data = self.store.get(self._key(name))
        last_sync = self._last_sync()
        if not data or last_sync is None:
            return None
        if is_expired(last_sync, self.clock(), self.ttl_hours):
            logger.info(f"Stored {name} data is expired, clearing...")
            clear()
            return None
        return _safe_json_loads(data)

    def _make_room(self) -> None:
        limit = settings.session_cache_max_entries * len(STORAGE_KEYS)
        if len(self.store) >= limit:
            prune_expired(self.store, self.clock(), self.ttl_hours)

    # User
    def save_user(self, user: Optional[Dict[str, Any]]) -> None:
        if user:
            user_data = _safe_json_dumps(user)
            if user_data:
                self._make_room()
                self.store[self._key("user")] = user_data
                self._stamp()
        else:
            self.store.pop(self._key("user"), None)
            self.store.pop(self._key("last_sync"), None)

    def get_user(self) -> Optional[Dict[str, Any]]:
        return self._read_fresh("user", self.clear_user)

    # Profile
    def save_user_profile(self, profile: Optional[Dict[str, Any]]) -> None:
        if profile:
            profile_data = _safe_json_dumps(profile)
            if profile_data:
                self.store[self._key("user_profile")] = profile_data
        else:
            self.store.pop(self._key("user_profile"), None)

    def get_user_profile(self) -> Optional[Dict[str, Any]]:
        return self._read_fresh("user_profile", self.clear_user_profile)

    # Session tokens
    def save_session(self, session: Dict[str, Any]) -> None:
        session_data = _safe_json_dumps(session)
        if session_data:
            self.store[self._key("session")] = session_data
            self._stamp()

    def get_session(self) -> Optional[Dict[str, Any]]:
        return self._read_fresh("session", self.clear_session)

    # Whole state
    def save_auth_state(self, auth_state: StoredAuthState) -> None:
        self.save_user(auth_state.user)
        self.save_user_profile(auth_state.user_profile)
        self._stamp(auth_state.last_sync)

    def get_auth_state(self) -> StoredAuthState:
        return StoredAuthState(
            user=self.get_user(),
            user_profile=self.get_user_profile(),
            last_sync=self._last_sync() or 0,
        )

    def clear_user(self) -> None:
        self.store.pop(self._key("user"), None)
        self.store.pop(self._key("last_sync"), None)

    def clear_user_profile(self) -> None:
        self.store.pop(self._key("user_profile"), None)

    def clear_session(self) -> None:
        self.store.pop(self._key("session"), None)

    def clear_all(self) -> None:
        for name in STORAGE_KEYS:
            self.store.pop(self._key(name), None)

    def has_valid_stored_auth(self) -> bool:
        last_sync = self._last_sync()
        if self.get_user() is None or last_sync is None:
            return False
        return not is_expired(last_sync, self.clock(), self.ttl_hours)

    def refresh_stored_data(self) -> None:
        self._stamp()
