"""EZID identifier service."""

import asyncio
from typing import Mapping

from aiohttp import BasicAuth, ClientTimeout
from yarl import URL

from ..conf.ezid import EzidConfig, ezid_config
from ..exceptions import AuthenticationError, ServiceError
from ..helpers import anvl
from ..helpers.logger import LOG, log_debug_metadata
from .service_handler import ServiceHandler


class EzidServiceHandler(ServiceHandler):
    """EZID service.

    Create, mint, read, update and delete identifiers in EZID. Each method performs a single
    HTTP exchange. Log in once, the session cookie returned by EZID then authenticates all
    following requests made with the same instance, also concurrent ones::

        async with EzidServiceHandler() as ezid:
            await ezid.login("username", "password")
            doi = await ezid.mint("doi:10.5072/FK2", {"_target": "https://example.org"})
            metadata = await ezid.get_metadata(doi)
    """

    service_name = "EZID"

    def __init__(self, base_url: str | None = None, config: EzidConfig | None = None) -> None:
        """EZID service.

        :param base_url: EZID instance to use, overrides the configured URL
        :param config: Service configuration, read from the environment by default
        """
        config = config or ezid_config()
        super().__init__(
            base_url=URL((base_url or config.EZID_URL).rstrip("/")),
            http_client_timeout=ClientTimeout(total=config.EZID_TIMEOUT),
            http_client_headers={"Accept": "text/plain"},
            connection_limit=config.EZID_CONNECTION_LIMIT,
            connection_limit_per_host=config.EZID_CONNECTION_LIMIT_PER_HOST,
        )
        self._session_lock = asyncio.Lock()
        self._username: str | None = None

    @property
    def authenticated(self) -> bool:
        """Indicate whether the last login succeeded and no logout followed."""
        return self._username is not None

    @property
    def username(self) -> str | None:
        """Account of the current session."""
        return self._username

    async def login(self, username: str, password: str) -> None:
        """Log in to EZID and keep the session cookie for the following requests.

        :param username: EZID account name
        :param password: EZID account password
        :raises AuthenticationError: if EZID rejects the credentials or cannot be reached
        """
        async with self._session_lock:
            # The previous session must not outlive a failed login.
            self._username = None
            self.clear_cookies()
            try:
                response = await self._request(
                    method="GET", path="login", headers={"Authorization": BasicAuth(username, password).encode()}
                )
                anvl.parse_result(response)
            except ServiceError as error:
                LOG.error("EZID login failed for %r: %s", username, error.message)
                raise AuthenticationError(error.message) from error
            self._username = username
        LOG.info("Logged in to EZID as %r.", username)

    async def logout(self) -> None:
        """Log out of EZID, invalidating the current session."""
        async with self._session_lock:
            response = await self._request(method="GET", path="logout")
            anvl.parse_result(response)
            self._username = None
            self.clear_cookies()
        LOG.info("Logged out of EZID.")

    async def create(self, identifier: str, metadata: Mapping[str, str] | None = None) -> str:
        """Create an identifier.

        The account must be allowed to create identifiers with the given prefix.

        :param identifier: Identifier to create, e.g. ``doi:10.5072/FK2/MYID1``
        :param metadata: Metadata elements to set on the new identifier
        :returns: The created identifier
        """
        log_debug_metadata(identifier, metadata)
        response = await self._request(method="PUT", path=f"id/{identifier}", data=anvl.encode(metadata))
        created = anvl.parse_result(response)
        LOG.info("EZID: identifier %r created.", created)
        return created

    async def mint(self, shoulder: str, metadata: Mapping[str, str] | None = None) -> str:
        """Have EZID generate a new unique identifier under a shoulder.

        :param shoulder: Identifier prefix the account may mint under, e.g. ``doi:10.5072/FK2``
        :param metadata: Metadata elements to set on the new identifier
        :returns: The minted identifier
        """
        log_debug_metadata(shoulder, metadata)
        response = await self._request(method="POST", path=f"shoulder/{shoulder}", data=anvl.encode(metadata))
        minted = anvl.parse_result(response)
        LOG.info("EZID: identifier %r minted.", minted)
        return minted

    async def get_metadata(self, identifier: str) -> dict[str, str]:
        """Retrieve the metadata of an identifier.

        :param identifier: The identifier
        :returns: Metadata element names mapped to their values
        """
        response = await self._request(method="GET", path=f"id/{identifier}")
        metadata = anvl.decode_metadata(response)
        log_debug_metadata(identifier, metadata)
        return metadata

    async def set_metadata(self, identifier: str, metadata: Mapping[str, str] | None) -> str:
        """Set metadata elements of an identifier.

        Elements not given are left as they are.

        :param identifier: The identifier
        :param metadata: Metadata elements to set
        :returns: The updated identifier
        """
        log_debug_metadata(identifier, metadata)
        response = await self._request(method="POST", path=f"id/{identifier}", data=anvl.encode(metadata))
        updated = anvl.parse_result(response)
        LOG.info("EZID: identifier %r updated.", updated)
        return updated

    async def delete(self, identifier: str) -> str:
        """Delete an identifier.

        EZID only deletes reserved identifiers, deleting a public one fails.

        :param identifier: The identifier
        :returns: The deleted identifier
        """
        response = await self._request(method="DELETE", path=f"id/{identifier}")
        deleted = anvl.parse_result(response)
        LOG.info("EZID: identifier %r deleted.", deleted)
        return deleted
