import importlib
import json


def test_save_and_load_round_trip(tmp_path):
    store = importlib.import_module('storage.session')
    path = str(tmp_path / 'nested' / 'session.json')
    store.save_session(store.make_session_record('http://tr/rpc', 'ABC'), path)
    data = store.load_session(path)
    assert data == {'url': 'http://tr/rpc', 'session_id': 'ABC'}
    assert not (tmp_path / 'nested' / 'session.json.tmp').exists()


def test_load_missing_or_invalid_file(tmp_path):
    store = importlib.import_module('storage.session')
    assert store.load_session(str(tmp_path / 'nope.json')) == {}
    bad = tmp_path / 'bad.json'
    bad.write_text('{not json')
    assert store.load_session(str(bad), debug_logging=True) == {}
    arr = tmp_path / 'arr.json'
    arr.write_text(json.dumps([1, 2]))
    assert store.load_session(str(arr)) == {}


def test_session_id_only_for_same_url():
    store = importlib.import_module('storage.session')
    data = {'url': 'http://a/rpc', 'session_id': 'X'}
    assert store.session_id_for(data, 'http://a/rpc') == 'X'
    assert store.session_id_for(data, 'http://b/rpc') is None
    assert store.session_id_for({'url': 'http://a/rpc', 'session_id': None}, 'http://a/rpc') is None
    assert store.session_id_for({}, 'http://a/rpc') is None
