import aiohttp
import logging
from typing import Optional

logger = logging.getLogger(__name__)

class SessionManager:
    """Owns one reusable aiohttp session per gateway."""

    def __init__(self, timeout: float = 300.0):
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None

    async def get_session(self) -> aiohttp.ClientSession:
        """Get or create the session."""
        if self._session is None or self._session.closed:
            logger.debug(f"Opening HTTP session (timeout {self.timeout.total}s)")
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    @property
    def is_open(self) -> bool:
        return self._session is not None and not self._session.closed

    async def close(self):
        """Close the current session if it exists."""
        if self.is_open:
            try:
                await self._session.close()
            except aiohttp.ClientError as e:
                logger.warning(f"Error closing session: {e}")
            finally:
                self._session = None

    async def __aenter__(self) -> 'SessionManager':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
