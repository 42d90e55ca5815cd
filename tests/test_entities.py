import importlib

import pytest


@pytest.fixture
def ent():
    return importlib.import_module('integrations.entities')


@pytest.mark.parametrize('payload', [None, {}])
def test_empty_payload_decodes_to_none(ent, payload):
    for cls in (ent.Torrent, ent.SessionInfo, ent.Stats, ent.TorrentsResult, ent.RenameTorrentInfo):
        assert ent.decode(payload, cls) is None


def test_torrent_tolerates_missing_and_unknown_fields(ent):
    t = ent.Torrent.from_dict({'id': 3, 'name': 'ubuntu.iso', 'someFutureField': 1})
    assert t.id == 3
    assert t.name == 'ubuntu.iso'
    assert t.status is None
    assert t.tracker_stats is None
    assert t.state == 'unknown'
    assert t.max_seeders is None


def test_torrent_nested_records(ent):
    t = ent.Torrent.from_dict({
        'id': 1,
        'status': 4,
        'peer-limit': 50,
        'files': [{'name': 'a.bin', 'length': 10, 'bytesCompleted': 5}],
        'fileStats': [{'wanted': True, 'priority': 1}],
        'peersFrom': {'fromDht': 2},
        'trackerStats': [
            {'host': 'tr1:80', 'seederCount': 3, 'lastAnnounceResult': 'Success'},
            {'host': 'tr2:80', 'seederCount': -1},
            'garbage',
        ],
    })
    assert t.state == 'downloading'
    assert t.peer_limit == 50
    assert t.files[0].name == 'a.bin' and t.files[0].bytes_completed == 5
    assert t.file_stats[0].priority == ent.Priority.HIGH
    assert t.file_stats[0].bytes_completed is None
    assert t.peers_from.from_dht == 2 and t.peers_from.from_pex is None
    assert [ts.host for ts in t.tracker_stats] == ['tr1:80', 'tr2:80']
    assert t.tracker_stats[0].last_announce_result == 'Success'
    assert t.max_seeders == 3


def test_enumerated_fields_decode_to_enums(ent):
    t = ent.Torrent.from_dict({
        'status': 6,
        'bandwidthPriority': -1,
        'fileStats': [{'priority': 0}, {'priority': 7}],
        'trackerStats': [{'announceState': 3, 'scrapeState': 9}],
    })
    assert t.status is ent.TorrentStatus.SEEDING
    assert t.bandwidth_priority is ent.Priority.LOW
    assert t.file_stats[0].priority is ent.Priority.NORMAL
    assert t.file_stats[1].priority == 7 and not isinstance(t.file_stats[1].priority, ent.Priority)
    assert t.tracker_stats[0].announce_state is ent.TrackerState.ACTIVE
    assert t.tracker_stats[0].scrape_state == 9
    assert t.to_dict()['status'] == 6 and type(t.to_dict()['status']) is int

    s = ent.SessionSettings.from_dict({'encryption': 'preferred'})
    assert s.encryption is ent.Encryption.PREFERRED
    assert ent.SessionSettings.from_dict({'encryption': 'sometimes'}).encryption == 'sometimes'
    assert ent.TorrentFileStats.from_dict({'priority': True}).priority is True


def test_torrents_result_with_removed(ent):
    res = ent.decode({'torrents': [{'id': 1}], 'removed': [4, 5]}, ent.TorrentsResult)
    assert [t.id for t in res.torrents] == [1]
    assert res.removed == [4, 5]


def test_session_info_includes_settings_and_read_only_fields(ent):
    info = ent.SessionInfo.from_dict({
        'version': '4.0.5',
        'rpc-version': 17,
        'download-dir': '/data',
        'speed-limit-down-enabled': True,
        'units': {'speed-units': ['kB/s', 'MB/s'], 'speed-bytes': 1000},
    })
    assert info.version == '4.0.5'
    assert info.rpc_version == 17
    assert info.download_dir == '/data'
    assert info.speed_limit_down_enabled is True
    assert info.units.speed_bytes == 1000
    assert info.config_dir is None


def test_to_dict_uses_protocol_keys_and_skips_unset(ent):
    s = ent.TorrentSettings(ids=[1], seed_ratio_limit=1.5, files_wanted=[0, 2])
    assert s.to_dict() == {'ids': [1], 'seedRatioLimit': 1.5, 'files-wanted': [0, 2]}
    assert ent.SessionSettings(encryption=ent.Encryption.REQUIRED).to_dict() == {'encryption': 'required'}


def test_new_torrent_added_and_duplicate_decode_to_same_shape(ent):
    body = {'id': 7, 'name': 'x', 'hashString': 'abcd'}
    added = ent.decode_new_torrent({'torrent-added': body})
    dup = ent.decode_new_torrent({'torrent-duplicate': body})
    assert type(added) is type(dup) is ent.NewTorrentInfo
    assert (added.id, added.name, added.hash_string) == (dup.id, dup.name, dup.hash_string) == (7, 'x', 'abcd')
    assert added.duplicate is False
    assert dup.duplicate is True
    assert dup.to_dict() == {'id': 7, 'name': 'x', 'hashString': 'abcd'}


def test_new_torrent_added_takes_priority(ent):
    info = ent.decode_new_torrent({
        'torrent-duplicate': {'id': 1},
        'torrent-added': {'id': 2},
    })
    assert info.id == 2 and not info.duplicate


@pytest.mark.parametrize('payload', [None, {}, {'other': 1}])
def test_new_torrent_without_known_key_is_none(ent, payload):
    assert ent.decode_new_torrent(payload) is None


def test_status_to_state(ent):
    assert ent.status_to_state(6) == 'seeding'
    assert ent.status_to_state(ent.TorrentStatus.STOPPED) == 'stopped'
    assert ent.status_to_state(42) == 'unknown'
    assert ent.status_to_state(None) == 'unknown'
    assert ent.status_to_state('x') == 'unknown'
