"""
Per-host cookie storage for the Nemlig session
"""

import threading
from typing import Dict, Iterable, Mapping, Optional


class SessionStore:
    """Cookies keyed by host, merged by cookie name.

    Saving never accumulates duplicate names: a cookie whose name is already
    stored replaces the old value. Cookies the server deletes are removed; other
    expiry is not tracked, an expired session shows up as a 401/403 from Nemlig.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._cookies: Dict[str, Dict[str, str]] = {}

    def load_cookies(self, host: str) -> Dict[str, str]:
        with self._lock:
            return dict(self._cookies.get(host, {}))

    def save_cookies(self, host: str, cookies: Mapping[str, str]) -> None:
        if not cookies:
            return
        with self._lock:
            stored = self._cookies.setdefault(host, {})
            stored.update(cookies)

    def remove_cookies(self, host: str, names: Iterable[str]) -> None:
        """Drop the named cookies, e.g. after the server expired them"""
        with self._lock:
            stored = self._cookies.get(host)
            if not stored:
                return
            for name in names:
                stored.pop(name, None)

    def clear(self, host: Optional[str] = None) -> None:
        """Forget the cookies of one host, or of every host"""
        with self._lock:
            if host is None:
                self._cookies.clear()
            else:
                self._cookies.pop(host, None)
