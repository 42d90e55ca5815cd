import pytest
from aioresponses import aioresponses

from core.errors import ArgumentError
from core.utils import RECENTLY_ACTIVE
from integrations.clients.transmission import TransmissionClient
from integrations.dispatcher import SESSION_HEADER
from integrations.entities import NewTorrent, SessionSettings, TorrentSettings
from integrations.envelopes import RpcResponse
from integrations.fields import TORRENT_ALL_FIELDS


pytestmark = pytest.mark.asyncio

URL = 'http://tr/transmission/rpc'


class FakeDispatcher:
    def __init__(self, responses=None):
        self.requests = []
        self._responses = list(responses or [])
        self.url = URL
        self.session_id = None
        self.current_tag = 0
        self.closed = False

    async def send(self, request):
        self.current_tag += 1
        request.tag = self.current_tag
        self.requests.append(request)
        if self._responses:
            return self._responses.pop(0)
        return RpcResponse('success')

    async def close(self):
        self.closed = True


def _client(*responses):
    client = TransmissionClient(URL)
    client.dispatcher = FakeDispatcher(responses)
    return client


def _ok(arguments=None):
    return RpcResponse('success', arguments)


async def test_torrent_get_defaults_to_all_fields_and_no_ids():
    client = _client(_ok({'torrents': [{'id': 1, 'name': 'a'}]}))
    res = await client.torrent_get()
    req = client.dispatcher.requests[0]
    assert req.method == 'torrent-get'
    assert req.arguments == {'fields': TORRENT_ALL_FIELDS}
    assert res.torrents[0].name == 'a'


async def test_torrent_get_with_ids_and_fields():
    client = _client()
    res = await client.torrent_get([1, 'c0ffee'], ['id', 'status'])
    assert client.dispatcher.requests[0].arguments == {'fields': ['id', 'status'], 'ids': [1, 'c0ffee']}
    assert res is None


async def test_torrent_get_recently_active_returns_removed():
    client = _client(_ok({'torrents': [], 'removed': [9]}))
    res = await client.torrent_get(RECENTLY_ACTIVE, ['id'])
    assert client.dispatcher.requests[0].arguments['ids'] == 'recently-active'
    assert res.removed == [9]


@pytest.mark.parametrize('method,rpc', [
    ('torrent_start', 'torrent-start'),
    ('torrent_start_now', 'torrent-start-now'),
    ('torrent_stop', 'torrent-stop'),
    ('torrent_verify', 'torrent-verify'),
    ('torrent_reannounce', 'torrent-reannounce'),
])
async def test_selector_methods_default_to_recently_active(method, rpc):
    client = _client()
    await getattr(client, method)()
    await getattr(client, method)([3, 'abc'])
    await getattr(client, method)(5)
    reqs = client.dispatcher.requests
    assert [r.method for r in reqs] == [rpc] * 3
    assert [r.arguments['ids'] for r in reqs] == ['recently-active', [3, 'abc'], [5]]


@pytest.mark.parametrize('method,rpc', [
    ('queue_move_top', 'queue-move-top'),
    ('queue_move_up', 'queue-move-up'),
    ('queue_move_down', 'queue-move-down'),
    ('queue_move_bottom', 'queue-move-bottom'),
])
async def test_queue_moves(method, rpc):
    client = _client()
    await getattr(client, method)([4, 2])
    req = client.dispatcher.requests[0]
    assert req.method == rpc
    assert req.arguments == {'ids': [4, 2]}


async def test_invalid_selector_is_rejected_before_sending():
    client = _client()
    with pytest.raises(ArgumentError):
        await client.torrent_stop([True])
    with pytest.raises(ArgumentError):
        await client.torrent_remove([1.5])
    with pytest.raises(ArgumentError):
        await client.queue_move_top({'ids': 1})
    assert client.dispatcher.requests == []


async def test_torrent_remove_and_set_location():
    client = _client()
    await client.torrent_remove([1, 2], delete_data=True)
    await client.torrent_set_location([1], '/new/place', move=True)
    r1, r2 = client.dispatcher.requests
    assert r1.method == 'torrent-remove'
    assert r1.arguments == {'ids': [1, 2], 'delete-local-data': True}
    assert r2.method == 'torrent-set-location'
    assert r2.arguments == {'ids': [1], 'location': '/new/place', 'move': True}


async def test_torrent_rename_path_decodes_result():
    client = _client(_ok({'id': 5, 'path': 'old', 'name': 'new'}))
    info = await client.torrent_rename_path(5, 'old', 'new')
    req = client.dispatcher.requests[0]
    assert req.arguments == {'ids': [5], 'path': 'old', 'name': 'new'}
    assert (info.id, info.path, info.name) == (5, 'old', 'new')


async def test_torrent_set_formats_ids():
    client = _client()
    await client.torrent_set(TorrentSettings(ids='abcdef', upload_limit=100, upload_limited=True))
    req = client.dispatcher.requests[0]
    assert req.method == 'torrent-set'
    assert req.arguments == {'ids': ['abcdef'], 'uploadLimit': 100, 'uploadLimited': True}


async def test_torrent_add_requires_filename_or_metainfo():
    client = _client()
    with pytest.raises(ArgumentError):
        await client.torrent_add(NewTorrent(download_dir='/x'))
    with pytest.raises(ArgumentError):
        await client.torrent_add(NewTorrent(filename='  ', metainfo=''))
    assert client.dispatcher.requests == []


async def test_torrent_add_added_and_duplicate():
    client = _client(
        _ok({'torrent-added': {'id': 1, 'name': 'n', 'hashString': 'h'}}),
        _ok({'torrent-duplicate': {'id': 1, 'name': 'n', 'hashString': 'h'}}),
        _ok(),
    )
    added = await client.torrent_add(NewTorrent(filename='magnet:?xt=urn:btih:h', paused=True))
    dup = await client.torrent_add(NewTorrent(metainfo='ZGF0YQ=='))
    none = await client.torrent_add(NewTorrent(filename='x'))
    reqs = client.dispatcher.requests
    assert reqs[0].arguments == {'filename': 'magnet:?xt=urn:btih:h', 'paused': True}
    assert reqs[1].arguments == {'metainfo': 'ZGF0YQ=='}
    assert added.id == dup.id == 1
    assert not added.duplicate and dup.duplicate
    assert none is None


async def test_session_methods():
    client = _client(
        _ok(),
        _ok({'version': '4.0.5'}),
        _ok({'activeTorrentCount': 2}),
        _ok(),
    )
    await client.set_session_settings(SessionSettings(download_dir='/dl', peer_port=51413))
    info = await client.get_session_information(['version'])
    stats = await client.get_session_statistic()
    await client.close_session()
    reqs = client.dispatcher.requests
    assert [r.method for r in reqs] == ['session-set', 'session-get', 'session-stats', 'session-close']
    assert reqs[0].arguments == {'download-dir': '/dl', 'peer-port': 51413}
    assert reqs[1].arguments == {'fields': ['version']}
    assert reqs[2].arguments is None
    assert reqs[3].arguments is None
    assert info.version == '4.0.5'
    assert stats.active_torrent_count == 2


async def test_session_get_without_fields_sends_no_arguments():
    client = _client(_ok())
    info = await client.get_session_information()
    assert client.dispatcher.requests[0].arguments is None
    assert info is None


async def test_system_methods():
    client = _client(
        _ok({'port-is-open': True}),
        _ok({'blocklist-size': 1234}),
        _ok({'path': '/data', 'size-bytes': 987654321}),
        _ok(),
        _ok(),
        _ok(),
    )
    assert await client.port_test() is True
    assert await client.blocklist_update() == 1234
    assert await client.free_space('/data') == 987654321
    assert client.dispatcher.requests[2].arguments == {'path': '/data'}
    # absent values
    assert await client.port_test() is None
    assert await client.blocklist_update() is None
    assert await client.free_space('/x') is None


async def test_context_manager_closes_dispatcher():
    client = _client()
    async with client as c:
        await c.torrent_start()
    assert client.dispatcher.closed


async def test_end_to_end_handshake_through_client():
    with aioresponses() as m:
        m.post(URL, status=409, headers={SESSION_HEADER: 'ABC'})
        m.post(URL, payload={'result': 'success', 'arguments': {'torrents': [{'id': 1, 'status': 6}]}, 'tag': 1})
        m.post(URL, payload={'result': 'success', 'arguments': {'torrent-duplicate': {'id': 1}}, 'tag': 2})
        async with TransmissionClient(URL) as client:
            res = await client.torrent_get(1, ['id', 'status'])
            info = await client.torrent_add(NewTorrent(filename='http://x/t.torrent'))
            assert client.session_id == 'ABC'
            assert client.current_tag == 2
    assert res.torrents[0].state == 'seeding'
    assert info.duplicate
