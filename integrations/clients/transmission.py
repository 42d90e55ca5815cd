from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

import aiohttp

from core.errors import ArgumentError
from core.events import EventBus
from core.utils import RECENTLY_ACTIVE, TorrentIds, format_ids, is_blank
from integrations.dispatcher import RpcDispatcher
from integrations.entities import (
    NewTorrent,
    NewTorrentInfo,
    RenameTorrentInfo,
    SessionInfo,
    SessionSettings,
    Stats,
    TorrentSettings,
    TorrentsResult,
    decode_new_torrent,
)
from integrations.envelopes import RpcRequest, RpcResponse
from integrations.fields import TORRENT_ALL_FIELDS


class TransmissionClient:
    """One client per daemon connection.

    Example::

        async with TransmissionClient('http://host:9091/transmission/rpc', login='u', password='p') as client:
            result = await client.torrent_get(fields=['id', 'name'])

    Torrent selectors (``ids``) accept an id, a hash string, a list mixing
    both, or ``RECENTLY_ACTIVE``.
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
        self.dispatcher = RpcDispatcher(
            url,
            session_id,
            login,
            password,
            http_session=http_session,
            request_timeout=request_timeout,
            max_concurrent=max_concurrent,
            debug_logging=debug_logging,
            event_bus=event_bus,
        )

    @property
    def url(self) -> str:
        return self.dispatcher.url

    @property
    def session_id(self) -> Optional[str]:
        return self.dispatcher.session_id

    @property
    def current_tag(self) -> int:
        return self.dispatcher.current_tag

    async def __aenter__(self) -> 'TransmissionClient':
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        await self.aclose()
        return False

    async def aclose(self) -> None:
        """Release the HTTP session if the client created it. Not an RPC call."""
        await self.dispatcher.close()

    async def _call(self, method: str, arguments: Any = None) -> RpcResponse:
        return await self.dispatcher.send(RpcRequest(method, arguments))

    async def _call_ids(self, method: str, ids: TorrentIds, **extra: Any) -> RpcResponse:
        arguments: Dict[str, Any] = {'ids': format_ids(ids)}
        arguments.update(extra)
        return await self._call(method, arguments)

    # ---- session ----

    async def close_session(self) -> None:
        """Ask the daemon to shut down (``session-close``)."""
        await self._call('session-close')

    async def set_session_settings(self, settings: SessionSettings) -> None:
        await self._call('session-set', settings)

    async def get_session_statistic(self) -> Optional[Stats]:
        response = await self._call('session-stats')
        return response.deserialize(Stats)

    async def get_session_information(self, fields: Optional[Sequence[str]] = None) -> Optional[SessionInfo]:
        arguments = {'fields': list(fields)} if fields else None
        response = await self._call('session-get', arguments)
        return response.deserialize(SessionInfo)

    # ---- torrents ----

    async def torrent_add(self, torrent: NewTorrent) -> Optional[NewTorrentInfo]:
        """Add a torrent by URL/path (``filename``) or base64 ``metainfo``.

        Returns the added torrent, or the existing one when the daemon reports
        a duplicate (``NewTorrentInfo.duplicate`` is then True).
        """
        if is_blank(torrent.metainfo) and is_blank(torrent.filename):
            raise ArgumentError('Either "filename" or "metainfo" must be included.')
        response = await self._call('torrent-add', torrent)
        return decode_new_torrent(response.arguments)

    async def torrent_set(self, settings: TorrentSettings) -> None:
        arguments = settings.to_dict()
        if 'ids' in arguments:
            arguments['ids'] = format_ids(arguments['ids'])
        await self._call('torrent-set', arguments)

    async def torrent_get(self, ids: Optional[TorrentIds] = None, fields: Optional[Sequence[str]] = None) -> Optional[TorrentsResult]:
        arguments: Dict[str, Any] = {'fields': list(fields) if fields else list(TORRENT_ALL_FIELDS)}
        if ids is not None and ids != [] and ids != ():
            arguments['ids'] = format_ids(ids)
        response = await self._call('torrent-get', arguments)
        return response.deserialize(TorrentsResult)

    async def torrent_remove(self, ids: TorrentIds, delete_data: bool = False) -> None:
        await self._call_ids('torrent-remove', ids, **{'delete-local-data': bool(delete_data)})

    async def torrent_start(self, ids: TorrentIds = RECENTLY_ACTIVE) -> None:
        await self._call_ids('torrent-start', ids)

    async def torrent_start_now(self, ids: TorrentIds = RECENTLY_ACTIVE) -> None:
        await self._call_ids('torrent-start-now', ids)

    async def torrent_stop(self, ids: TorrentIds = RECENTLY_ACTIVE) -> None:
        await self._call_ids('torrent-stop', ids)

    async def torrent_verify(self, ids: TorrentIds = RECENTLY_ACTIVE) -> None:
        await self._call_ids('torrent-verify', ids)

    async def torrent_reannounce(self, ids: TorrentIds = RECENTLY_ACTIVE) -> None:
        await self._call_ids('torrent-reannounce', ids)

    async def queue_move_top(self, ids: TorrentIds) -> None:
        await self._call_ids('queue-move-top', ids)

    async def queue_move_up(self, ids: TorrentIds) -> None:
        await self._call_ids('queue-move-up', ids)

    async def queue_move_down(self, ids: TorrentIds) -> None:
        await self._call_ids('queue-move-down', ids)

    async def queue_move_bottom(self, ids: TorrentIds) -> None:
        await self._call_ids('queue-move-bottom', ids)

    async def torrent_set_location(self, ids: TorrentIds, location: str, move: bool = False) -> None:
        if is_blank(location):
            raise ArgumentError('location must not be empty')
        await self._call_ids('torrent-set-location', ids, location=location, move=bool(move))

    async def torrent_rename_path(self, torrent_id: int, path: str, name: str) -> Optional[RenameTorrentInfo]:
        response = await self._call_ids('torrent-rename-path', [torrent_id], path=path, name=name)
        return response.deserialize(RenameTorrentInfo)

    # ---- system ----

    async def port_test(self) -> Optional[bool]:
        response = await self._call('port-test')
        value = (response.arguments or {}).get('port-is-open')
        return bool(value) if value is not None else None

    async def blocklist_update(self) -> Optional[int]:
        response = await self._call('blocklist-update')
        value = (response.arguments or {}).get('blocklist-size')
        return int(value) if value is not None else None

    async def free_space(self, path: str) -> Optional[int]:
        response = await self._call('free-space', {'path': path})
        value = (response.arguments or {}).get('size-bytes')
        return int(value) if value is not None else None

