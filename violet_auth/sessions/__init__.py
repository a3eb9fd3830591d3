"""
Integration with the distributed session store.

Session records (login state and verification challenges) are kept in a
key-value store, keyed by session ID. Transport of the session ID itself
(e.g. in a cookie) is left to the web layer.

See :mod:`.store`.
"""

from .store import SessionStore, get_session_store
