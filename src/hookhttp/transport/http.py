"""Default transport: requests for sync sessions, aiohttp for multiplexing."""

from .multiplex import AiohttpMultiplex
from .sync import RequestsSession


class HttpTransport:
    """
    Transport combining both concrete backends.

    Example:
        client = Client(transport=HttpTransport(limit_per_host=4, trust_env=False))
    """

    def __init__(self, limit: int = 100, limit_per_host: int = 10, trust_env: bool = True) -> None:
        """
        Initialize the transport.

        Args:
            limit: Total connection limit for multiplexed exchanges
            limit_per_host: Per-host connection limit for multiplexed exchanges
            trust_env: Read proxy settings from the environment in both backends
        """
        self.limit = limit
        self.limit_per_host = limit_per_host
        self.trust_env = trust_env

    def open_session(self) -> RequestsSession:
        return RequestsSession(trust_env=self.trust_env)

    def open_multiplex(self) -> AiohttpMultiplex:
        return AiohttpMultiplex(
            limit=self.limit,
            limit_per_host=self.limit_per_host,
            trust_env=self.trust_env,
        )
