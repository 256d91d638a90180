"""Base class for plain-text HTTP service integrations.

It provides a connection-pooled http client that keeps the session cookies of the service,
and requests that come with error handling.
"""

from typing import Optional

from aiohttp import ClientError, ClientSession, ClientTimeout, CookieJar, TCPConnector
from yarl import URL

from ..exceptions import ProtocolError, TransportError
from ..helpers.logger import LOG


class ServiceHandler:
    """General service class handler to have similar implementation between services.

    Classes inheriting should set the service_name.
    """

    service_name: str
    _http_client: Optional[ClientSession] = None

    def __init__(
        self,
        base_url: URL,
        http_client_timeout: ClientTimeout | None = None,
        http_client_headers: dict | None = None,
        connection_limit: int = 100,
        connection_limit_per_host: int = 0,
    ) -> None:
        """Create an instance with the service location and http client settings.

        :param base_url: Service base url, endpoint paths are appended to it
        :param http_client_timeout: Timeout of a single request
        :param http_client_headers: Headers sent with every request
        :param connection_limit: Total number of simultaneous connections
        :param connection_limit_per_host: Simultaneous connections to the same host, 0 for no limit
        """
        self.base_url = base_url
        self.http_client_timeout = http_client_timeout
        self.http_client_headers = http_client_headers
        self.connection_limit = connection_limit
        self.connection_limit_per_host = connection_limit_per_host

    @property
    def _client(self) -> ClientSession:
        """Singleton http client, customized for the service."""
        if self._http_client is None or self._http_client.closed:
            self._http_client = ClientSession(
                connector=TCPConnector(limit=self.connection_limit, limit_per_host=self.connection_limit_per_host),
                # Session cookies are also kept for services addressed by IP.
                cookie_jar=CookieJar(unsafe=True),
                timeout=self.http_client_timeout,
                headers=self.http_client_headers,
            )
        return self._http_client

    async def http_client_close(self) -> None:
        """Close http client."""
        if self._http_client is not None:
            await self._http_client.close()
            self._http_client = None

    def clear_cookies(self) -> None:
        """Forget the cookies received from the service."""
        if self._http_client is not None:
            self._http_client.cookie_jar.clear()

    async def __aenter__(self) -> "ServiceHandler":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.http_client_close()

    async def _request(
        self,
        method: str = "GET",
        path: str = "",
        data: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> str:
        """Request to service REST API.

        HTTP error statuses are not raised, the service describes errors in the response body.

        :param method: HTTP method
        :param path: Path appended to self.base_url
        :param data: Request body, sent as UTF-8 plain text
        :param headers: Headers for this request only, e.g. credentials
        :raises TransportError: if the service could not be reached or the exchange failed
        :raises ProtocolError: if the service returned an empty or undecodable body
        :returns: Response body
        """
        url = self.base_url
        path = path.lstrip("/")
        if path:
            url = url / path

        LOG.debug("%s request to %s '%s'", method, self.service_name, url)
        headers = dict(headers or {})
        if data is not None:
            headers["Content-Type"] = "text/plain; charset=UTF-8"
        try:
            async with self._client.request(
                method=method,
                url=url,
                data=data.encode("utf-8") if data is not None else None,
                headers=headers or None,
            ) as response:
                try:
                    content = await response.text(encoding="utf-8")
                except UnicodeDecodeError as error:
                    message = f"{method} request to {self.service_name} '{url}' returned a body that is not UTF-8."
                    LOG.error(message)
                    raise ProtocolError(message) from error
                LOG.debug(
                    "%s request to %s '%s' returned a %s: %r", method, self.service_name, url, response.status, content
                )
        except TimeoutError as error:
            LOG.exception("%s request to %s '%s' timed out.", method, self.service_name, url)
            raise TransportError(f"{self.service_name} error: Could not reach service provider.") from error
        except ClientError as error:
            LOG.exception("%s request to %s '%s' raised an unexpected exception.", method, self.service_name, url)
            raise TransportError(f"{self.service_name} error: {error}") from error

        if not content.strip():
            message = f"{method} request to {self.service_name} '{url}' returned an empty {response.status} response."
            LOG.error(message)
            raise ProtocolError(message)

        return content
