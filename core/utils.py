from __future__ import annotations

import base64
from typing import List, Sequence, Union

from core.errors import ArgumentError


RECENTLY_ACTIVE = 'recently-active'

# A torrent selector: one id or hash, a sequence of them, or RECENTLY_ACTIVE.
TorrentIds = Union[int, str, Sequence[Union[int, str]]]


def _check_id(value) -> Union[int, str]:
    # bool is an int subclass but never a valid torrent id
    if isinstance(value, bool):
        raise ArgumentError(f'Invalid torrent id: {value!r}')
    if isinstance(value, int):
        if value < 0:
            raise ArgumentError(f'Invalid torrent id: {value!r}')
        return value
    if isinstance(value, str):
        v = value.strip()
        if not v or v == RECENTLY_ACTIVE:
            raise ArgumentError(f'Invalid torrent hash: {value!r}')
        return v
    raise ArgumentError(f'Invalid torrent id: {value!r}')


def format_ids(ids: TorrentIds) -> Union[str, List[Union[int, str]]]:
    """Collapse a torrent selector into the value of the RPC ``ids`` argument.

    Returns either the literal ``"recently-active"`` or a list of numeric ids
    and/or hash strings.
    """
    if isinstance(ids, str):
        if ids == RECENTLY_ACTIVE:
            return RECENTLY_ACTIVE
        return [_check_id(ids)]
    if isinstance(ids, (int, bool)):
        return [_check_id(ids)]
    if isinstance(ids, (list, tuple, set, frozenset)):
        return [_check_id(x) for x in ids]
    raise ArgumentError(f'Invalid torrent selector: {ids!r}')


def is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def encode_metainfo(path: str) -> str:
    """Read a .torrent file and return it base64-encoded for ``metainfo``."""
    with open(path, 'rb') as f:
        return base64.b64encode(f.read()).decode('ascii')
