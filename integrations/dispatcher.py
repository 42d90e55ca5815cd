from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional, Tuple

import aiohttp

from core.errors import ProtocolError, SessionError, TransportError
from core.events import EventBus
from integrations.envelopes import RpcRequest, RpcResponse


SESSION_HEADER = 'X-Transmission-Session-Id'
RPC_CONTENT_TYPE = 'application/json-rpc'


class RpcDispatcher:
    """Sends RPC requests and negotiates the session token.

    Holds the per-connection state: endpoint, session token and tag counter.
    Tag assignment and the token read happen without suspending, so tasks on
    one event loop do not interleave them; the object is not thread-safe.
    """

    def __init__(
        self,
        url: str,
        session_id: Optional[str] = None,
        login: Optional[str] = None,
        password: Optional[str] = None,
        *,
        http_session: Optional[aiohttp.ClientSession] = None,
        request_timeout: float = 10,
        max_concurrent: int = 0,
        debug_logging: bool = False,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self._url = url
        self.session_id = session_id
        self.current_tag = 0
        self._authorization: Optional[str] = None
        if login and login.strip():
            self._authorization = aiohttp.BasicAuth(login, password or '', encoding='utf-8').encode()
        self._http_session = http_session
        self._owns_session = http_session is None
        self.request_timeout = request_timeout
        self._semaphore = asyncio.Semaphore(max_concurrent) if max_concurrent and max_concurrent > 0 else None
        self.debug_logging = debug_logging
        self.event_bus = event_bus if event_bus is not None else EventBus(debug_logging=debug_logging)

    @property
    def url(self) -> str:
        return self._url

    def _headers(self) -> Dict[str, str]:
        headers = {
            SESSION_HEADER: self.session_id or '',
            'Content-Type': RPC_CONTENT_TYPE,
        }
        if self._authorization:
            headers['Authorization'] = self._authorization
        return headers

    def _get_session(self) -> aiohttp.ClientSession:
        if self._http_session is None or self._http_session.closed:
            self._http_session = aiohttp.ClientSession()
            self._owns_session = True
        return self._http_session

    async def close(self) -> None:
        if self._owns_session and self._http_session is not None:
            if not self._http_session.closed:
                await self._http_session.close()
            self._http_session = None

    async def _post(self, body: str) -> Tuple[int, Optional[str], Any, str]:
        session = self._get_session()
        timeout = aiohttp.ClientTimeout(total=self.request_timeout)
        try:
            async with session.post(self._url, data=body, headers=self._headers(), timeout=timeout) as response:
                text = await response.text(errors='replace')
                return response.status, response.reason, response.headers, text
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(None, str(e) or e.__class__.__name__) from e

    async def _post_limited(self, body: str) -> Tuple[int, Optional[str], Any, str]:
        # Limit concurrency per client
        if self._semaphore is not None:
            async with self._semaphore:
                return await self._post(body)
        return await self._post(body)

    def _parse(self, text: str, request: RpcRequest) -> RpcResponse:
        try:
            response = RpcResponse.from_json(text)
        except ValueError as e:
            if self.debug_logging:
                logging.error(f'RPC {request.method} (tag {request.tag}): unparsable response: {text[:200]!r}')
            raise ProtocolError('invalid response') from e
        if response.tag is not None and response.tag != request.tag and self.debug_logging:
            logging.warning(f'RPC {request.method}: response tag {response.tag} does not match request tag {request.tag}')
        if not response.is_success:
            self.event_bus.log('rpc_failed', method=request.method, tag=request.tag, result=response.result)
            raise ProtocolError(response.result)
        return response

    async def send(self, request: RpcRequest) -> RpcResponse:
        self.current_tag += 1
        request.tag = self.current_tag
        body = request.to_json()
        refreshed = False
        while True:
            self.event_bus.debug('rpc_request', method=request.method, tag=request.tag, refreshed=refreshed)
            status, reason, headers, text = await self._post_limited(body)
            if 200 <= status < 300:
                return self._parse(text, request)
            if status == 409:
                new_id = headers.get(SESSION_HEADER) if headers is not None else None
                if not new_id:
                    self.event_bus.log('rpc_failed', method=request.method, tag=request.tag, status=status, result='missing session token')
                    raise SessionError('missing session token')
                self.session_id = new_id
                if refreshed:
                    self.event_bus.log('rpc_failed', method=request.method, tag=request.tag, status=status, result='session token negotiation failed')
                    raise SessionError('session token negotiation failed')
                self.event_bus.log('session_refreshed', method=request.method, tag=request.tag)
                refreshed = True
                continue
            self.event_bus.log('rpc_failed', method=request.method, tag=request.tag, status=status, result=reason)
            raise TransportError(status, reason)

