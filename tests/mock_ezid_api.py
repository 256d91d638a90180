"""Mock aiohttp.web server for EZID API calls."""

import asyncio
import logging
from dataclasses import dataclass, field
from os import getenv
from urllib.parse import unquote
from uuid import uuid4

from aiohttp import BasicAuth, web

FORMAT = "[%(asctime)s][%(levelname)-8s](L:%(lineno)s) %(funcName)s: %(message)s"
logging.basicConfig(format=FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

LOG = logging.getLogger("mock_ezid")
LOG.setLevel(getenv("LOG_LEVEL", "INFO"))

USERS = {"apitest": "apitest"}
SHOULDERS = ("doi:10.5072/FK2", "ark:/99999/fk4")
SESSION_COOKIE = "sessionid"


@dataclass
class MockEzidState:
    """Identifiers, sessions and request statistics of one mock server."""

    delay: float = 0
    identifiers: dict[str, dict[str, str]] = field(default_factory=dict)
    sessions: dict[str, str] = field(default_factory=dict)
    requests: list[tuple[str, str]] = field(default_factory=list)
    active: int = 0
    max_active: int = 0


STATE = web.AppKey("state", MockEzidState)


def escape(text: str) -> str:
    """ANVL escape."""
    return text.replace("%", "%25").replace("\n", "%0A").replace("\r", "%0D").replace(":", "%3A")


def parse_anvl(body: str) -> dict[str, str]:
    """Parse an ANVL request body."""
    metadata = {}
    for line in body.splitlines():
        if not line.strip():
            continue
        key, value = line.split(":", 1)
        metadata[unquote(key).strip()] = unquote(value).strip()
    return metadata


def text(message: str, status: int = 200) -> web.Response:
    """Plain text EZID response."""
    return web.Response(status=status, text=message, content_type="text/plain")


@web.middleware
async def bookkeeping(req: web.Request, handler):
    """Check the Accept header and record request concurrency."""
    state = req.app[STATE]
    state.requests.append((req.method, req.path))
    if req.headers.get("Accept") != "text/plain":
        return text("error: not acceptable", status=406)
    state.active += 1
    state.max_active = max(state.max_active, state.active)
    try:
        if state.delay:
            await asyncio.sleep(state.delay)
        return await handler(req)
    finally:
        state.active -= 1


def session_owner(req: web.Request) -> str | None:
    """User of the session cookie sent with the request."""
    session = req.cookies.get(SESSION_COOKIE)
    return req.app[STATE].sessions.get(session) if session else None


def unauthorized() -> web.Response:
    """Response for requests without a valid session."""
    return text("error: unauthorized", status=401)


async def login(req: web.Request) -> web.Response:
    """Login endpoint, HTTP Basic authentication."""
    try:
        auth = BasicAuth.decode(req.headers.get("Authorization", ""))
    except ValueError:
        return unauthorized()
    if USERS.get(auth.login) != auth.password:
        LOG.info("Rejected credentials for %s", auth.login)
        return unauthorized()
    session = uuid4().hex
    req.app[STATE].sessions[session] = auth.login
    response = text("success: session cookie returned")
    response.set_cookie(SESSION_COOKIE, session)
    return response


async def logout(req: web.Request) -> web.Response:
    """Logout endpoint."""
    session = req.cookies.get(SESSION_COOKIE)
    req.app[STATE].sessions.pop(session, None)
    response = text("success: authentication credentials flushed")
    response.del_cookie(SESSION_COOKIE)
    return response


def success(identifier: str) -> web.Response:
    """Success response, DOIs come with their shadow ARK."""
    if identifier.startswith("doi:"):
        shadow = "ark:/b" + identifier[len("doi:10.") :].lower()
        return text(f"success: {escape(identifier)} | {escape(shadow)}", status=201)
    return text(f"success: {escape(identifier)}", status=201)


async def register(req: web.Request, identifier: str, owner: str) -> web.Response:
    """Store a new identifier with the metadata of the request."""
    state = req.app[STATE]
    if not identifier.startswith(SHOULDERS):
        return text("error: forbidden", status=403)
    if identifier in state.identifiers:
        return text("error: bad request - identifier already exists", status=400)
    metadata = {"_owner": owner, "_status": "public", "_profile": "erc"}
    metadata.update(parse_anvl(await req.text()))
    state.identifiers[identifier] = metadata
    return success(identifier)


async def create(req: web.Request) -> web.Response:
    """Identifier creation endpoint."""
    owner = session_owner(req)
    if owner is None:
        return unauthorized()
    return await register(req, req.match_info["identifier"], owner)


async def mint(req: web.Request) -> web.Response:
    """Identifier minting endpoint."""
    owner = session_owner(req)
    if owner is None:
        return unauthorized()
    shoulder = req.match_info["shoulder"]
    return await register(req, f"{shoulder}{uuid4().hex[:8].upper()}", owner)


async def view(req: web.Request) -> web.Response:
    """Identifier metadata endpoint, no authentication needed."""
    identifier = req.match_info["identifier"]
    metadata = req.app[STATE].identifiers.get(identifier)
    if metadata is None:
        return text("error: bad request - no such identifier", status=400)
    lines = [f"success: {escape(identifier)}"]
    lines += [f"{escape(key)}: {escape(value)}" for key, value in metadata.items()]
    return text("\n".join(lines) + "\n")


async def update(req: web.Request) -> web.Response:
    """Identifier metadata update endpoint."""
    if session_owner(req) is None:
        return unauthorized()
    identifier = req.match_info["identifier"]
    metadata = req.app[STATE].identifiers.get(identifier)
    if metadata is None:
        return text("error: bad request - no such identifier", status=400)
    metadata.update(parse_anvl(await req.text()))
    return text(f"success: {escape(identifier)}")


async def delete(req: web.Request) -> web.Response:
    """Identifier deletion endpoint, only reserved identifiers can be deleted."""
    if session_owner(req) is None:
        return unauthorized()
    identifier = req.match_info["identifier"]
    identifiers = req.app[STATE].identifiers
    if identifier not in identifiers:
        return text("error: bad request - no such identifier", status=400)
    if identifiers[identifier].get("_status") != "reserved":
        return text("error: bad request - identifier status does not support deletion", status=400)
    del identifiers[identifier]
    return text(f"success: {escape(identifier)}")


async def init(delay: float = 0) -> web.Application:
    """Start server."""
    app = web.Application(middlewares=[bookkeeping])
    app[STATE] = MockEzidState(delay=delay)
    app.router.add_get("/login", login)
    app.router.add_get("/logout", logout)
    app.router.add_put("/id/{identifier:.+}", create)
    app.router.add_get("/id/{identifier:.+}", view)
    app.router.add_post("/id/{identifier:.+}", update)
    app.router.add_delete("/id/{identifier:.+}", delete)
    app.router.add_post("/shoulder/{shoulder:.+}", mint)
    return app


if __name__ == "__main__":
    web.run_app(init(), port=8006)
