"""
Internal service API for the distributed session store.

Used to load, save and delete the :class:`.SessionRecord` of a session.
Records are stored as signed JSON web tokens, so a record that was modified
in the store is detected on load.
"""

import logging
from typing import Any, Mapping, Optional

import jwt
import redis
from redis.cluster import RedisCluster

from .. import config as default_config
from .. import domain
from ..exceptions import SessionCorrupted, SessionCreationFailed, \
    SessionDeletionFailed

logger = logging.getLogger(__name__)


class SessionStore(object):
    """
    Manages a connection to Redis.

    In fact, the StrictRedis instance is thread safe and connections are
    attached at the time a command is executed. This class simply provides a
    container for configuration.

    Nothing here serializes concurrent requests for the same session; the
    last write wins.
    """

    def __init__(self, host: str, port: int, db: int, secret: str,
                 duration: int = 1296000, cluster: bool = False,
                 connection: Any = None) -> None:
        """Open the connection to Redis."""
        if connection is not None:
            self.r = connection
        elif cluster:
            logger.debug('New Redis cluster connection at %s, port %s',
                         host, port)
            self.r = RedisCluster(host=host, port=port)
        else:
            logger.debug('New Redis connection at %s, port %s', host, port)
            self.r = redis.StrictRedis(host=host, port=port, db=db)
        self._secret = secret
        self._duration = duration

    def load(self, session_id: str) -> domain.SessionRecord:
        """
        Get the record of a session.

        A session that is not (or no longer) in the store has an empty
        record.

        Raises
        ------
        :class:`.SessionCorrupted`
            If the stored record does not carry a valid signature.

        """
        stored = self.r.get(session_id)
        if not stored:
            logger.debug('No such session: %s', session_id)
            return domain.SessionRecord()
        return self._decode(stored)

    def save(self, session_id: str, record: domain.SessionRecord) -> None:
        """
        Write the record of a session, resetting its expiry.

        Raises
        ------
        :class:`.SessionCreationFailed`

        """
        try:
            self.r.set(session_id, self._encode(domain.to_dict(record)),
                       ex=self._duration)
        except redis.exceptions.ConnectionError as e:
            raise SessionCreationFailed(f'Connection failed: {e}') from e
        except Exception as e:
            raise SessionCreationFailed(f'Failed to save: {e}') from e

    def delete(self, session_id: str) -> None:
        """
        Delete a session in the key-value store by ID.

        Raises
        ------
        :class:`.SessionDeletionFailed`

        """
        try:
            self.r.delete(session_id)
        except redis.exceptions.ConnectionError as e:
            raise SessionDeletionFailed(f'Connection failed: {e}') from e
        except Exception as e:
            raise SessionDeletionFailed(f'Failed to delete: {e}') from e

    def _encode(self, session_data: dict) -> str:
        return jwt.encode(session_data, self._secret, algorithm='HS256')

    def _decode(self, session_jwt: Any) -> domain.SessionRecord:
        if isinstance(session_jwt, bytes):
            session_jwt = session_jwt.decode('ascii')
        try:
            data = jwt.decode(session_jwt, self._secret, algorithms=['HS256'])
        except jwt.exceptions.InvalidTokenError as e:
            logger.error('Invalid or corrupted session record: %s', e)
            raise SessionCorrupted('Invalid or corrupted session record') \
                from e
        return domain.from_dict(domain.SessionRecord, data)


def get_session_store(config: Optional[Mapping[str, Any]] = None) \
        -> SessionStore:
    """Get a new connection to the session store."""
    if config is None:
        config = vars(default_config)
    host = config.get('REDIS_HOST', 'localhost')
    port = int(config.get('REDIS_PORT', '6379'))
    db = int(config.get('REDIS_DATABASE', '0'))
    cluster = config.get('REDIS_CLUSTER', '0') == '1'
    secret = config['SESSION_SECRET']
    duration = int(config.get('SESSION_DURATION', '1296000'))
    return SessionStore(host, port, db, secret, duration, cluster=cluster)
