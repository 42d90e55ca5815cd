import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from core.config import (
    DEFAULT_CONFIG_PATH,
    ConfigAccessor,
    load_yaml as _load_yaml,
    sanitize_config as _sanitize_config,
    validate_config as _validate_config,
)
from core.errors import ArgumentError, TransmissionError
from core.events import setup_logging
from core.utils import RECENTLY_ACTIVE, encode_metainfo
from integrations.clients import build_client
from integrations.entities import NewTorrent
from integrations.fields import TORRENT_SUMMARY_FIELDS
from storage.session import (
    load_session as storage_load_session,
    save_session as storage_save_session,
    make_session_record,
    session_id_for,
)


def _env(key: str, default: Any) -> Any:
    return os.environ.get(key, default)


def _load_config(validate: bool = True) -> Dict[str, Any]:
    cfg = _load_yaml(_env('CONFIG_PATH', DEFAULT_CONFIG_PATH))
    cfg = _sanitize_config(cfg)
    if validate:
        _validate_config(cfg)
    return cfg


def _make_client(cfg: Dict[str, Any], session_id: Optional[str]):
    return build_client(cfg, session_id=session_id)


def _parse_ids(values: Optional[List[str]]):
    if not values:
        return RECENTLY_ACTIVE
    out = []
    for v in values:
        for part in str(v).split(','):
            part = part.strip()
            if not part:
                continue
            out.append(int(part) if part.isdigit() else part)
    if not out:
        raise ArgumentError(f"no torrent ids in {' '.join(values)!r}")
    return out


async def cmd_session(args, client):
    info = await client.get_session_information(getattr(args, 'fields', None))
    return info.to_dict() if info is not None else None


async def cmd_stats(args, client):
    stats = await client.get_session_statistic()
    return stats.to_dict() if stats is not None else None


async def cmd_list(args, client):
    ids = _parse_ids(args.ids) if getattr(args, 'ids', None) else None
    fields = getattr(args, 'fields', None) or TORRENT_SUMMARY_FIELDS
    result = await client.torrent_get(ids, fields)
    if result is None:
        return []
    return [t.to_dict() for t in (result.torrents or []) if t is not None]


async def cmd_add(args, client):
    metainfo = None
    if getattr(args, 'torrent_file', None):
        try:
            metainfo = encode_metainfo(args.torrent_file)
        except OSError as e:
            raise ArgumentError(f"cannot read torrent file {args.torrent_file}: {e.strerror or e}") from e
    torrent = NewTorrent(
        filename=getattr(args, 'filename', None),
        metainfo=metainfo,
        download_dir=getattr(args, 'download_dir', None),
        paused=True if getattr(args, 'paused', False) else None,
    )
    info = await client.torrent_add(torrent)
    if info is None:
        return None
    out = info.to_dict()
    out['duplicate'] = info.duplicate
    return out


async def cmd_action(args, client):
    method = getattr(client, f'torrent_{args.action}')
    await method(_parse_ids(args.ids))
    return {"ok": True, "action": args.action}


async def cmd_remove(args, client):
    await client.torrent_remove(_parse_ids(args.ids), delete_data=bool(args.delete_data))
    return {"ok": True, "action": "remove"}


async def cmd_move(args, client):
    await client.torrent_set_location(_parse_ids(args.ids), args.location, move=bool(args.move))
    return {"ok": True, "action": "move", "location": args.location}


async def cmd_free_space(args, client):
    size = await client.free_space(args.path)
    return {"path": args.path, "size-bytes": size}


async def cmd_port_test(args, client):
    return {"port-is-open": await client.port_test()}


async def cmd_blocklist_update(args, client):
    return {"blocklist-size": await client.blocklist_update()}


def _persist_session(path: str, client) -> None:
    if not client.session_id:
        return
    try:
        storage_save_session(make_session_record(client.url, client.session_id), path)
    except OSError as e:
        logging.warning(f'Could not persist session id to {path}: {e}')


async def run(args, cfg: Optional[Dict[str, Any]] = None) -> int:
    if cfg is None:
        cfg = _load_config()
    acc = ConfigAccessor(cfg)
    session_path = acc.session_file_path()
    stored = storage_load_session(session_path, debug_logging=acc.debug_logging())
    client = _make_client(cfg, session_id_for(stored, acc.endpoint()['url']))
    try:
        async with client:
            result = await args.func(args, client)
    except TransmissionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        _persist_session(session_path, client)
    print(json.dumps(result, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Transmission RPC client")
    sub = ap.add_subparsers(dest='cmd')

    p_session = sub.add_parser('session', help='Show session settings')
    p_session.add_argument('--fields', nargs='*', help='Only these session fields')
    p_session.set_defaults(func=cmd_session)

    p_stats = sub.add_parser('stats', help='Show session statistics')
    p_stats.set_defaults(func=cmd_stats)

    p_list = sub.add_parser('list', help='List torrents')
    p_list.add_argument('--ids', nargs='*', help='Torrent ids or hashes (default: all)')
    p_list.add_argument('--fields', nargs='*', help='Fields to fetch')
    p_list.set_defaults(func=cmd_list)

    p_add = sub.add_parser('add', help='Add a torrent')
    src = p_add.add_mutually_exclusive_group(required=True)
    src.add_argument('--filename', help='URL, magnet link or path on the daemon host')
    src.add_argument('--torrent-file', help='Local .torrent file to upload')
    p_add.add_argument('--download-dir')
    p_add.add_argument('--paused', action='store_true')
    p_add.set_defaults(func=cmd_add)

    for action in ('start', 'stop', 'verify', 'reannounce'):
        p = sub.add_parser(action, help=f'{action.capitalize()} torrents (default: recently active)')
        p.add_argument('ids', nargs='*')
        p.set_defaults(func=cmd_action, action=action)

    p_remove = sub.add_parser('remove', help='Remove torrents')
    p_remove.add_argument('ids', nargs='+')
    p_remove.add_argument('--delete-data', action='store_true')
    p_remove.set_defaults(func=cmd_remove)

    p_move = sub.add_parser('move', help='Set torrent data location')
    p_move.add_argument('ids', nargs='+')
    p_move.add_argument('--location', required=True)
    p_move.add_argument('--move', action='store_true', help='Move data from the old location')
    p_move.set_defaults(func=cmd_move)

    p_free = sub.add_parser('free-space', help='Free space in a daemon-side directory')
    p_free.add_argument('path')
    p_free.set_defaults(func=cmd_free_space)

    p_port = sub.add_parser('port-test', help='Check whether the peer port is reachable')
    p_port.set_defaults(func=cmd_port_test)

    p_block = sub.add_parser('blocklist-update', help='Refresh the blocklist')
    p_block.set_defaults(func=cmd_blocklist_update)
    return ap


def main():
    ap = build_parser()
    args = ap.parse_args()
    if not hasattr(args, 'func'):
        ap.print_help()
        sys.exit(1)
    cfg = _load_config(validate=False)
    setup_logging(ConfigAccessor(cfg).debug_logging())
    _validate_config(cfg)
    sys.exit(asyncio.run(run(args, cfg)))


if __name__ == '__main__':
    main()
