"""Table sessions: signed tokens plus an in-process activity record."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from uuid import uuid4

from itsdangerous import BadSignature, URLSafeSerializer

from config import config

logger = logging.getLogger(__name__)


class SessionSigner:
    """
    Issue and verify session tokens using itsdangerous.

    Tokens carry no timestamp; how long a session lives is decided by the
    sliding record in ``SessionStore``.
    """

    def __init__(self, secret_key: str | None = None) -> None:
        self._serializer = URLSafeSerializer(secret_key or config.security.secret_key)

    def issue(self) -> str:
        """Create a token wrapping a fresh random session ID."""
        return self._serializer.dumps(str(uuid4()))

    def unsign(self, token: str) -> str | None:
        """Return the session ID inside ``token``, or None if the signature is bad."""
        try:
            return self._serializer.loads(token)
        except BadSignature:
            return None


_session_signer: SessionSigner | None = None


def get_session_signer() -> SessionSigner:
    """Get or create the process-wide signer."""
    global _session_signer
    if _session_signer is None:
        _session_signer = SessionSigner()
    return _session_signer


@dataclass
class SessionRecord:
    """Bookkeeping for one open table session."""

    created_at: datetime = field(default_factory=datetime.now)
    last_activity: datetime = field(default_factory=datetime.now)
    expires_at: datetime = field(default_factory=datetime.now)

    def touch(self, ttl: int) -> None:
        """Mark activity and push expiry ``ttl`` seconds past it."""
        self.last_activity = datetime.now()
        self.expires_at = self.last_activity + timedelta(seconds=ttl)

    @property
    def expired(self) -> bool:
        return self.expires_at < datetime.now()


class SessionStore:
    """
    In-process session store keyed by signed token.

    Sessions live only as long as the server process. Activity slides the
    expiry forward, so an idle table closes ``ttl`` seconds after its last
    command.
    """

    def __init__(self, ttl: int | None = None) -> None:
        self.ttl = ttl or config.session_ttl
        self._records: dict[str, SessionRecord] = {}

    async def open(self, token: str) -> SessionRecord:
        """Start (or restart) the session for ``token``."""
        record = SessionRecord()
        record.touch(self.ttl)
        self._records[token] = record
        return record

    async def get(self, token: str) -> SessionRecord | None:
        """Return the live record, dropping it if it has expired."""
        record = self._records.get(token)
        if record is not None and record.expired:
            del self._records[token]
            return None
        return record

    async def touch(self, token: str) -> SessionRecord | None:
        """Record activity on a live session."""
        record = await self.get(token)
        if record is not None:
            record.touch(self.ttl)
        return record

    async def expire(self) -> list[str]:
        """Remove expired sessions and return their tokens."""
        expired = [token for token, record in self._records.items() if record.expired]
        for token in expired:
            del self._records[token]
        if expired:
            logger.info("Expired %d session(s)", len(expired))
        return expired

    def __len__(self) -> int:
        return len(self._records)


_session_store: SessionStore | None = None


def get_session_store() -> SessionStore:
    """Get or create the process-wide store."""
    global _session_store
    if _session_store is None:
        _session_store = SessionStore()
    return _session_store


async def create_session() -> str:
    """Issue a token and open its session."""
    token = get_session_signer().issue()
    await get_session_store().open(token)
    return token


def extract_session_id(token: str) -> str | None:
    """Return the raw session ID from a signed token, or None if forged."""
    return get_session_signer().unsign(token)
