"""Queue of EZID write requests executed by a fixed pool of workers.

Callers that issue many requests hand them to :class:`EzidClient` and carry on. Requests
are executed asynchronously by at most ``workers`` concurrent workers sharing one EZID
session, which limits the rate of requests sent to EZID.
"""

import asyncio
import os
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Mapping

from ..conf.ezid import EzidConfig, ezid_config
from ..exceptions import AuthenticationError, QueueShutdownError
from ..helpers.logger import LOG
from .ezid_service import EzidServiceHandler


class Operation(Enum):
    """Write operations that can be queued."""

    CREATE = "create"
    SET_METADATA = "set_metadata"
    DELETE = "delete"


class QueueState(Enum):
    """Lifecycle of a request queue."""

    ACCEPTING = "accepting"
    DRAINING = "draining"
    TERMINATED = "terminated"


@dataclass(frozen=True)
class ServiceRequest:
    """A single queued EZID request."""

    operation: Operation
    identifier: str
    metadata: Mapping[str, str] | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.operation, Operation):
            raise ValueError(f"Unknown operation: {self.operation!r}")
        if self.identifier is None:
            raise ValueError("Identifier must not be None.")
        if self.metadata is not None:
            # Later changes to the caller's dict must not reach the queued request.
            object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def execute(self, service: EzidServiceHandler) -> Awaitable[str]:
        """Run the request against EZID.

        :param service: EZID service to send the request with
        :returns: Coroutine resolving to the identifier returned by EZID
        """
        match self.operation:
            case Operation.CREATE:
                return service.create(self.identifier, self.metadata)
            case Operation.SET_METADATA:
                return service.set_metadata(self.identifier, self.metadata)
            case Operation.DELETE:
                return service.delete(self.identifier)


@dataclass(frozen=True)
class RequestOutcome:
    """Result of an executed request."""

    request: ServiceRequest
    identifier: str | None = None
    error: Exception | None = field(default=None, compare=False)

    @property
    def ok(self) -> bool:
        """Indicate whether the request succeeded."""
        return self.error is None


OutcomeCallback = Callable[[RequestOutcome], Any]


class EzidClient:
    """Asynchronous EZID client.

    Write requests are queued and executed by a fixed number of workers, the
    submitting call returns at once. Failures are logged, and can be observed through
    the future returned by :meth:`submit` or an outcome callback::

        async with EzidClient() as client:
            if await client.login("username", "password"):
                for identifier, metadata in records:
                    client.create(identifier, metadata)
        # leaving the block waits until every queued request has been executed

    Reading metadata and minting are not queued, use :attr:`service` for them.
    """

    def __init__(
        self,
        service: EzidServiceHandler | None = None,
        workers: int | None = None,
        config: EzidConfig | None = None,
    ) -> None:
        """Create a client with a worker pool.

        :param service: EZID service to send requests with, created from the configuration by default
        :param workers: Number of concurrent workers, defaults to the configured value or the CPU count
        :param config: Configuration, read from the environment by default
        """
        config = config or ezid_config()
        self._service = service or EzidServiceHandler(config=config)
        if workers is None:
            workers = config.EZID_WORKERS or os.cpu_count() or 1
        self._workers = workers
        if self._workers < 1:
            raise ValueError(f"Worker count must be positive, got {self._workers}.")
        LOG.info("Number of EZID request workers: %d", self._workers)

        self._queue: asyncio.Queue[tuple[ServiceRequest, asyncio.Future, OutcomeCallback | None] | None] = (
            asyncio.Queue()
        )
        self._tasks: list[asyncio.Task] = []
        self._state = QueueState.ACCEPTING
        self._drain: asyncio.Task | None = None

    @property
    def service(self) -> EzidServiceHandler:
        """EZID service shared by the workers."""
        return self._service

    @property
    def workers(self) -> int:
        """Number of workers."""
        return self._workers

    @property
    def state(self) -> QueueState:
        """Current lifecycle state."""
        return self._state

    async def login(self, username: str, password: str) -> bool:
        """Log in to EZID.

        The reason of a failure is logged, not returned.

        :param username: EZID account name
        :param password: EZID account password
        :returns: True if the login succeeded
        """
        try:
            await self._service.login(username, password)
        except AuthenticationError:
            return False
        return True

    def submit(self, request: ServiceRequest, callback: OutcomeCallback | None = None) -> asyncio.Future:
        """Queue a request for execution.

        Must be called from the event loop the requests are executed in.

        :param request: Request to execute
        :param callback: Called with the outcome once the request was executed
        :raises QueueShutdownError: if the queue no longer accepts requests
        :returns: Future resolving to the :class:`RequestOutcome`, it never holds an exception
        """
        if self._state is not QueueState.ACCEPTING:
            raise QueueShutdownError(f"Request queue is {self._state.value}, cannot accept {request.operation.value}.")
        self._start_workers()
        future = asyncio.get_running_loop().create_future()
        self._queue.put_nowait((request, future, callback))
        LOG.debug("Queued %s request for %r.", request.operation.value, request.identifier)
        return future

    def create(self, identifier: str, metadata: Mapping[str, str] | None = None) -> asyncio.Future:
        """Queue the creation of an identifier."""
        return self.submit(ServiceRequest(Operation.CREATE, identifier, metadata))

    def set_metadata(self, identifier: str, metadata: Mapping[str, str] | None) -> asyncio.Future:
        """Queue a metadata update of an identifier."""
        return self.submit(ServiceRequest(Operation.SET_METADATA, identifier, metadata))

    def delete(self, identifier: str) -> asyncio.Future:
        """Queue the deletion of an identifier."""
        return self.submit(ServiceRequest(Operation.DELETE, identifier))

    async def shutdown(self) -> None:
        """Stop accepting requests and wait until all queued requests have been executed.

        Concurrent calls all wait for the same drain.
        """
        if self._drain is None:
            LOG.info("Shutting down EZID request queue...")
            self._state = QueueState.DRAINING
            self._drain = asyncio.create_task(self._drain_workers(), name="ezid-queue-drain")
        # Cancelling one caller leaves the drain running.
        await asyncio.shield(self._drain)

    async def _drain_workers(self) -> None:
        await self._queue.join()
        for _ in self._tasks:
            self._queue.put_nowait(None)
        await asyncio.gather(*self._tasks)
        self._tasks.clear()
        self._state = QueueState.TERMINATED
        LOG.info("EZID request queue terminated.")

    async def __aenter__(self) -> "EzidClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.shutdown()
        await self._service.http_client_close()

    def _start_workers(self) -> None:
        if self._tasks:
            return
        self._tasks = [
            asyncio.create_task(self._worker(), name=f"ezid-worker-{number}") for number in range(self._workers)
        ]

    async def _worker(self) -> None:
        """Execute queued requests until the stop marker is received."""
        while True:
            item = await self._queue.get()
            try:
                if item is None:
                    return
                request, future, callback = item
                outcome = await self._execute(request)
                if not future.done():
                    future.set_result(outcome)
                if callback is not None:
                    self._notify(callback, outcome)
            finally:
                self._queue.task_done()

    async def _execute(self, request: ServiceRequest) -> RequestOutcome:
        LOG.debug("Executing %s request for %r.", request.operation.value, request.identifier)
        try:
            identifier = await request.execute(self._service)
        except Exception as error:
            LOG.error("FAILED %s request for %r: %s", request.operation.value, request.identifier, error)
            return RequestOutcome(request, error=error)
        LOG.debug("Completed %s request for %r.", request.operation.value, request.identifier)
        return RequestOutcome(request, identifier=identifier)

    @staticmethod
    def _notify(callback: OutcomeCallback, outcome: RequestOutcome) -> None:
        try:
            callback(outcome)
        except Exception:
            LOG.exception("Outcome callback for %r raised an exception.", outcome.request.identifier)
