from typing import Optional
import aiohttp
from aiohttp import ClientTimeout

class AioSessionCache:
    """Shared outbound HTTP client session, created on first use."""

    def __init__(self, timeout: float = 10):
        self.timeout = timeout
        self.client_session: Optional[aiohttp.ClientSession] = None

    async def get_session(self) -> aiohttp.ClientSession:
        if self.client_session is None or self.client_session.closed:
            self.client_session = aiohttp.ClientSession(timeout=ClientTimeout(total=self.timeout))
        return self.client_session
    
    async def close(self):
        if self.client_session:
            await self.client_session.close()
            self.client_session = None
