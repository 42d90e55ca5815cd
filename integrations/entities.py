"""Typed views over the ``arguments`` payload of Transmission responses.

Every field is optional: the daemon only returns what was asked for, so a
missing key decodes to ``None`` and unknown keys are ignored. Field metadata
carries the protocol key (``key``) and, for nested objects, the entity class
(``entity``) and whether the value is a list of them (``many``). Enumerated
values name their ``enum``; a value the enum does not know stays as sent.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional, Type, TypeVar


E = TypeVar('E', bound='Entity')


def rpc_field(key: str, *, entity: Optional[type] = None, many: bool = False, enum: Optional[Type[Enum]] = None):
    return field(default=None, metadata={'key': key, 'entity': entity, 'many': many, 'enum': enum})


def _to_enum(enum_cls: Type[Enum], value: Any) -> Any:
    if value is None or isinstance(value, bool):
        return value
    try:
        return enum_cls(value)
    except (TypeError, ValueError):
        return value


class TorrentStatus(IntEnum):
    STOPPED = 0
    CHECK_WAIT = 1
    CHECKING = 2
    DOWNLOAD_WAIT = 3
    DOWNLOADING = 4
    SEED_WAIT = 5
    SEEDING = 6


class Priority(IntEnum):
    LOW = -1
    NORMAL = 0
    HIGH = 1


class TrackerState(IntEnum):
    INACTIVE = 0
    WAITING = 1
    QUEUED = 2
    ACTIVE = 3


class Encryption(str, Enum):
    REQUIRED = 'required'
    PREFERRED = 'preferred'
    TOLERATED = 'tolerated'


def status_to_state(status: Optional[int]) -> str:
    mapping = {0: 'stopped', 1: 'check_wait', 2: 'checking', 3: 'download_wait', 4: 'downloading', 5: 'seed_wait', 6: 'seeding'}
    try:
        return mapping.get(int(status), 'unknown')
    except (TypeError, ValueError):
        return 'unknown'


@dataclass
class Entity:
    @classmethod
    def from_dict(cls: Type[E], data: Any) -> Optional[E]:
        if not isinstance(data, dict):
            return None
        kwargs: Dict[str, Any] = {}
        for f in fields(cls):
            key = f.metadata.get('key', f.name)
            if key not in data:
                continue
            value = data[key]
            sub = f.metadata.get('entity')
            if sub is not None and value is not None:
                if f.metadata.get('many'):
                    value = [sub.from_dict(v) for v in value if isinstance(v, dict)] if isinstance(value, list) else None
                else:
                    value = sub.from_dict(value)
            enum_cls = f.metadata.get('enum')
            if enum_cls is not None:
                value = _to_enum(enum_cls, value)
            kwargs[f.name] = value
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, Entity):
                value = value.to_dict()
            elif isinstance(value, list):
                value = [v.to_dict() if isinstance(v, Entity) else v for v in value]
            elif isinstance(value, Enum):
                value = value.value
            out[f.metadata.get('key', f.name)] = value
        return out


def decode(payload: Optional[Dict[str, Any]], entity_cls: Type[E]) -> Optional[E]:
    """Decode a response payload; absent or empty payloads give ``None``."""
    if not payload or not isinstance(payload, dict):
        return None
    return entity_cls.from_dict(payload)


# ---- torrent-get ----

@dataclass
class TorrentFile(Entity):
    bytes_completed: Optional[int] = rpc_field('bytesCompleted')
    length: Optional[int] = rpc_field('length')
    name: Optional[str] = rpc_field('name')


@dataclass
class TorrentFileStats(Entity):
    bytes_completed: Optional[int] = rpc_field('bytesCompleted')
    wanted: Optional[bool] = rpc_field('wanted')
    priority: Optional[Priority] = rpc_field('priority', enum=Priority)


@dataclass
class TorrentPeer(Entity):
    address: Optional[str] = rpc_field('address')
    client_name: Optional[str] = rpc_field('clientName')
    client_is_choked: Optional[bool] = rpc_field('clientIsChoked')
    client_is_interested: Optional[bool] = rpc_field('clientIsInterested')
    flag_str: Optional[str] = rpc_field('flagStr')
    is_downloading_from: Optional[bool] = rpc_field('isDownloadingFrom')
    is_encrypted: Optional[bool] = rpc_field('isEncrypted')
    is_incoming: Optional[bool] = rpc_field('isIncoming')
    is_uploading_to: Optional[bool] = rpc_field('isUploadingTo')
    is_utp: Optional[bool] = rpc_field('isUTP')
    peer_is_choked: Optional[bool] = rpc_field('peerIsChoked')
    peer_is_interested: Optional[bool] = rpc_field('peerIsInterested')
    port: Optional[int] = rpc_field('port')
    progress: Optional[float] = rpc_field('progress')
    rate_to_client: Optional[int] = rpc_field('rateToClient')
    rate_to_peer: Optional[int] = rpc_field('rateToPeer')


@dataclass
class PeersFrom(Entity):
    from_cache: Optional[int] = rpc_field('fromCache')
    from_dht: Optional[int] = rpc_field('fromDht')
    from_incoming: Optional[int] = rpc_field('fromIncoming')
    from_lpd: Optional[int] = rpc_field('fromLpd')
    from_ltep: Optional[int] = rpc_field('fromLtep')
    from_pex: Optional[int] = rpc_field('fromPex')
    from_tracker: Optional[int] = rpc_field('fromTracker')


@dataclass
class TorrentTracker(Entity):
    announce: Optional[str] = rpc_field('announce')
    id: Optional[int] = rpc_field('id')
    scrape: Optional[str] = rpc_field('scrape')
    tier: Optional[int] = rpc_field('tier')


@dataclass
class TrackerStats(Entity):
    announce: Optional[str] = rpc_field('announce')
    scrape: Optional[str] = rpc_field('scrape')
    host: Optional[str] = rpc_field('host')
    last_announce_result: Optional[str] = rpc_field('lastAnnounceResult')
    last_scrape_result: Optional[str] = rpc_field('lastScrapeResult')
    last_announce_start_time: Optional[int] = rpc_field('lastAnnounceStartTime')
    last_announce_time: Optional[int] = rpc_field('lastAnnounceTime')
    next_announce_time: Optional[int] = rpc_field('nextAnnounceTime')
    last_scrape_start_time: Optional[int] = rpc_field('lastScrapeStartTime')
    last_scrape_time: Optional[int] = rpc_field('lastScrapeTime')
    next_scrape_time: Optional[int] = rpc_field('nextScrapeTime')
    download_count: Optional[int] = rpc_field('downloadCount')
    last_announce_peer_count: Optional[int] = rpc_field('lastAnnouncePeerCount')
    leecher_count: Optional[int] = rpc_field('leecherCount')
    seeder_count: Optional[int] = rpc_field('seederCount')
    tier: Optional[int] = rpc_field('tier')
    id: Optional[int] = rpc_field('id')
    announce_state: Optional[TrackerState] = rpc_field('announceState', enum=TrackerState)
    scrape_state: Optional[TrackerState] = rpc_field('scrapeState', enum=TrackerState)
    has_announced: Optional[bool] = rpc_field('hasAnnounced')
    has_scraped: Optional[bool] = rpc_field('hasScraped')
    is_backup: Optional[bool] = rpc_field('isBackup')
    last_announce_succeeded: Optional[bool] = rpc_field('lastAnnounceSucceeded')
    last_announce_timed_out: Optional[bool] = rpc_field('lastAnnounceTimedOut')
    last_scrape_succeeded: Optional[bool] = rpc_field('lastScrapeSucceeded')
    last_scrape_timed_out: Optional[bool] = rpc_field('lastScrapeTimedOut')


@dataclass
class Torrent(Entity):
    activity_date: Optional[int] = rpc_field('activityDate')
    added_date: Optional[int] = rpc_field('addedDate')
    bandwidth_priority: Optional[Priority] = rpc_field('bandwidthPriority', enum=Priority)
    comment: Optional[str] = rpc_field('comment')
    corrupt_ever: Optional[int] = rpc_field('corruptEver')
    creator: Optional[str] = rpc_field('creator')
    date_created: Optional[int] = rpc_field('dateCreated')
    desired_available: Optional[int] = rpc_field('desiredAvailable')
    done_date: Optional[int] = rpc_field('doneDate')
    download_dir: Optional[str] = rpc_field('downloadDir')
    downloaded_ever: Optional[int] = rpc_field('downloadedEver')
    download_limit: Optional[int] = rpc_field('downloadLimit')
    download_limited: Optional[bool] = rpc_field('downloadLimited')
    edit_date: Optional[int] = rpc_field('editDate')
    error: Optional[int] = rpc_field('error')
    error_string: Optional[str] = rpc_field('errorString')
    eta: Optional[int] = rpc_field('eta')
    eta_idle: Optional[int] = rpc_field('etaIdle')
    files: Optional[List[TorrentFile]] = rpc_field('files', entity=TorrentFile, many=True)
    file_stats: Optional[List[TorrentFileStats]] = rpc_field('fileStats', entity=TorrentFileStats, many=True)
    hash_string: Optional[str] = rpc_field('hashString')
    have_unchecked: Optional[int] = rpc_field('haveUnchecked')
    have_valid: Optional[int] = rpc_field('haveValid')
    honors_session_limits: Optional[bool] = rpc_field('honorsSessionLimits')
    id: Optional[int] = rpc_field('id')
    is_finished: Optional[bool] = rpc_field('isFinished')
    is_private: Optional[bool] = rpc_field('isPrivate')
    is_stalled: Optional[bool] = rpc_field('isStalled')
    labels: Optional[List[str]] = rpc_field('labels')
    left_until_done: Optional[int] = rpc_field('leftUntilDone')
    magnet_link: Optional[str] = rpc_field('magnetLink')
    manual_announce_time: Optional[int] = rpc_field('manualAnnounceTime')
    max_connected_peers: Optional[int] = rpc_field('maxConnectedPeers')
    metadata_percent_complete: Optional[float] = rpc_field('metadataPercentComplete')
    name: Optional[str] = rpc_field('name')
    peer_limit: Optional[int] = rpc_field('peer-limit')
    peers: Optional[List[TorrentPeer]] = rpc_field('peers', entity=TorrentPeer, many=True)
    peers_connected: Optional[int] = rpc_field('peersConnected')
    peers_from: Optional[PeersFrom] = rpc_field('peersFrom', entity=PeersFrom)
    peers_getting_from_us: Optional[int] = rpc_field('peersGettingFromUs')
    peers_sending_to_us: Optional[int] = rpc_field('peersSendingToUs')
    percent_done: Optional[float] = rpc_field('percentDone')
    pieces: Optional[str] = rpc_field('pieces')
    piece_count: Optional[int] = rpc_field('pieceCount')
    piece_size: Optional[int] = rpc_field('pieceSize')
    priorities: Optional[List[int]] = rpc_field('priorities')
    queue_position: Optional[int] = rpc_field('queuePosition')
    rate_download: Optional[int] = rpc_field('rateDownload')
    rate_upload: Optional[int] = rpc_field('rateUpload')
    recheck_progress: Optional[float] = rpc_field('recheckProgress')
    seconds_downloading: Optional[int] = rpc_field('secondsDownloading')
    seconds_seeding: Optional[int] = rpc_field('secondsSeeding')
    seed_idle_limit: Optional[int] = rpc_field('seedIdleLimit')
    seed_idle_mode: Optional[int] = rpc_field('seedIdleMode')
    seed_ratio_limit: Optional[float] = rpc_field('seedRatioLimit')
    seed_ratio_mode: Optional[int] = rpc_field('seedRatioMode')
    size_when_done: Optional[int] = rpc_field('sizeWhenDone')
    start_date: Optional[int] = rpc_field('startDate')
    status: Optional[TorrentStatus] = rpc_field('status', enum=TorrentStatus)
    trackers: Optional[List[TorrentTracker]] = rpc_field('trackers', entity=TorrentTracker, many=True)
    tracker_stats: Optional[List[TrackerStats]] = rpc_field('trackerStats', entity=TrackerStats, many=True)
    total_size: Optional[int] = rpc_field('totalSize')
    torrent_file: Optional[str] = rpc_field('torrentFile')
    uploaded_ever: Optional[int] = rpc_field('uploadedEver')
    upload_limit: Optional[int] = rpc_field('uploadLimit')
    upload_limited: Optional[bool] = rpc_field('uploadLimited')
    upload_ratio: Optional[float] = rpc_field('uploadRatio')
    wanted: Optional[List[int]] = rpc_field('wanted')
    webseeds: Optional[List[str]] = rpc_field('webseeds')
    webseeds_sending_to_us: Optional[int] = rpc_field('webseedsSendingToUs')

    @property
    def state(self) -> str:
        return status_to_state(self.status)

    @property
    def max_seeders(self) -> Optional[int]:
        counts = [ts.seeder_count for ts in (self.tracker_stats or []) if ts is not None and isinstance(ts.seeder_count, int)]
        return max(counts) if counts else None


@dataclass
class TorrentsResult(Entity):
    torrents: Optional[List[Torrent]] = rpc_field('torrents', entity=Torrent, many=True)
    # Only returned when ids is "recently-active"
    removed: Optional[List[int]] = rpc_field('removed')


# ---- torrent-add / torrent-set / torrent-rename-path ----

@dataclass
class NewTorrent(Entity):
    filename: Optional[str] = rpc_field('filename')
    metainfo: Optional[str] = rpc_field('metainfo')
    cookies: Optional[str] = rpc_field('cookies')
    download_dir: Optional[str] = rpc_field('download-dir')
    labels: Optional[List[str]] = rpc_field('labels')
    paused: Optional[bool] = rpc_field('paused')
    peer_limit: Optional[int] = rpc_field('peer-limit')
    bandwidth_priority: Optional[int] = rpc_field('bandwidthPriority')
    files_wanted: Optional[List[int]] = rpc_field('files-wanted')
    files_unwanted: Optional[List[int]] = rpc_field('files-unwanted')
    priority_high: Optional[List[int]] = rpc_field('priority-high')
    priority_low: Optional[List[int]] = rpc_field('priority-low')
    priority_normal: Optional[List[int]] = rpc_field('priority-normal')


@dataclass
class NewTorrentInfo(Entity):
    id: Optional[int] = rpc_field('id')
    name: Optional[str] = rpc_field('name')
    hash_string: Optional[str] = rpc_field('hashString')
    # Not a protocol field: set when the daemon reported torrent-duplicate
    duplicate: bool = field(default=False, metadata={'key': '_duplicate'})

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        out.pop('_duplicate', None)
        return out


def decode_new_torrent(payload: Optional[Dict[str, Any]]) -> Optional[NewTorrentInfo]:
    if not payload or not isinstance(payload, dict):
        return None
    if isinstance(payload.get('torrent-added'), dict):
        return NewTorrentInfo.from_dict(payload['torrent-added'])
    if isinstance(payload.get('torrent-duplicate'), dict):
        info = NewTorrentInfo.from_dict(payload['torrent-duplicate'])
        info.duplicate = True
        return info
    return None


@dataclass
class TorrentSettings(Entity):
    ids: Optional[Any] = rpc_field('ids')
    bandwidth_priority: Optional[int] = rpc_field('bandwidthPriority')
    download_limit: Optional[int] = rpc_field('downloadLimit')
    download_limited: Optional[bool] = rpc_field('downloadLimited')
    files_wanted: Optional[List[int]] = rpc_field('files-wanted')
    files_unwanted: Optional[List[int]] = rpc_field('files-unwanted')
    honors_session_limits: Optional[bool] = rpc_field('honorsSessionLimits')
    labels: Optional[List[str]] = rpc_field('labels')
    location: Optional[str] = rpc_field('location')
    peer_limit: Optional[int] = rpc_field('peer-limit')
    priority_high: Optional[List[int]] = rpc_field('priority-high')
    priority_low: Optional[List[int]] = rpc_field('priority-low')
    priority_normal: Optional[List[int]] = rpc_field('priority-normal')
    queue_position: Optional[int] = rpc_field('queuePosition')
    seed_idle_limit: Optional[int] = rpc_field('seedIdleLimit')
    seed_idle_mode: Optional[int] = rpc_field('seedIdleMode')
    seed_ratio_limit: Optional[float] = rpc_field('seedRatioLimit')
    seed_ratio_mode: Optional[int] = rpc_field('seedRatioMode')
    tracker_add: Optional[List[str]] = rpc_field('trackerAdd')
    tracker_remove: Optional[List[int]] = rpc_field('trackerRemove')
    tracker_replace: Optional[List[Any]] = rpc_field('trackerReplace')
    upload_limit: Optional[int] = rpc_field('uploadLimit')
    upload_limited: Optional[bool] = rpc_field('uploadLimited')


@dataclass
class RenameTorrentInfo(Entity):
    id: Optional[int] = rpc_field('id')
    path: Optional[str] = rpc_field('path')
    name: Optional[str] = rpc_field('name')


# ---- session-get / session-set / session-stats ----

@dataclass
class SessionUnits(Entity):
    speed_units: Optional[List[str]] = rpc_field('speed-units')
    speed_bytes: Optional[int] = rpc_field('speed-bytes')
    size_units: Optional[List[str]] = rpc_field('size-units')
    size_bytes: Optional[int] = rpc_field('size-bytes')
    memory_units: Optional[List[str]] = rpc_field('memory-units')
    memory_bytes: Optional[int] = rpc_field('memory-bytes')


@dataclass
class SessionSettings(Entity):
    alt_speed_down: Optional[int] = rpc_field('alt-speed-down')
    alt_speed_enabled: Optional[bool] = rpc_field('alt-speed-enabled')
    alt_speed_time_begin: Optional[int] = rpc_field('alt-speed-time-begin')
    alt_speed_time_day: Optional[int] = rpc_field('alt-speed-time-day')
    alt_speed_time_enabled: Optional[bool] = rpc_field('alt-speed-time-enabled')
    alt_speed_time_end: Optional[int] = rpc_field('alt-speed-time-end')
    alt_speed_up: Optional[int] = rpc_field('alt-speed-up')
    blocklist_enabled: Optional[bool] = rpc_field('blocklist-enabled')
    blocklist_url: Optional[str] = rpc_field('blocklist-url')
    cache_size_mb: Optional[int] = rpc_field('cache-size-mb')
    dht_enabled: Optional[bool] = rpc_field('dht-enabled')
    download_dir: Optional[str] = rpc_field('download-dir')
    download_queue_enabled: Optional[bool] = rpc_field('download-queue-enabled')
    download_queue_size: Optional[int] = rpc_field('download-queue-size')
    encryption: Optional[Encryption] = rpc_field('encryption', enum=Encryption)
    idle_seeding_limit: Optional[int] = rpc_field('idle-seeding-limit')
    idle_seeding_limit_enabled: Optional[bool] = rpc_field('idle-seeding-limit-enabled')
    incomplete_dir: Optional[str] = rpc_field('incomplete-dir')
    incomplete_dir_enabled: Optional[bool] = rpc_field('incomplete-dir-enabled')
    lpd_enabled: Optional[bool] = rpc_field('lpd-enabled')
    peer_limit_global: Optional[int] = rpc_field('peer-limit-global')
    peer_limit_per_torrent: Optional[int] = rpc_field('peer-limit-per-torrent')
    peer_port: Optional[int] = rpc_field('peer-port')
    peer_port_random_on_start: Optional[bool] = rpc_field('peer-port-random-on-start')
    pex_enabled: Optional[bool] = rpc_field('pex-enabled')
    port_forwarding_enabled: Optional[bool] = rpc_field('port-forwarding-enabled')
    queue_stalled_enabled: Optional[bool] = rpc_field('queue-stalled-enabled')
    queue_stalled_minutes: Optional[int] = rpc_field('queue-stalled-minutes')
    rename_partial_files: Optional[bool] = rpc_field('rename-partial-files')
    script_torrent_done_enabled: Optional[bool] = rpc_field('script-torrent-done-enabled')
    script_torrent_done_filename: Optional[str] = rpc_field('script-torrent-done-filename')
    seed_queue_enabled: Optional[bool] = rpc_field('seed-queue-enabled')
    seed_queue_size: Optional[int] = rpc_field('seed-queue-size')
    seed_ratio_limit: Optional[float] = rpc_field('seedRatioLimit')
    seed_ratio_limited: Optional[bool] = rpc_field('seedRatioLimited')
    speed_limit_down: Optional[int] = rpc_field('speed-limit-down')
    speed_limit_down_enabled: Optional[bool] = rpc_field('speed-limit-down-enabled')
    speed_limit_up: Optional[int] = rpc_field('speed-limit-up')
    speed_limit_up_enabled: Optional[bool] = rpc_field('speed-limit-up-enabled')
    start_added_torrents: Optional[bool] = rpc_field('start-added-torrents')
    trash_original_torrent_files: Optional[bool] = rpc_field('trash-original-torrent-files')
    utp_enabled: Optional[bool] = rpc_field('utp-enabled')


@dataclass
class SessionInfo(SessionSettings):
    """Everything ``session-get`` reports: the writable settings plus read-only state."""

    blocklist_size: Optional[int] = rpc_field('blocklist-size')
    config_dir: Optional[str] = rpc_field('config-dir')
    rpc_version: Optional[int] = rpc_field('rpc-version')
    rpc_version_minimum: Optional[int] = rpc_field('rpc-version-minimum')
    rpc_version_semver: Optional[str] = rpc_field('rpc-version-semver')
    session_id: Optional[str] = rpc_field('session-id')
    units: Optional[SessionUnits] = rpc_field('units', entity=SessionUnits)
    version: Optional[str] = rpc_field('version')


@dataclass
class StatDetails(Entity):
    uploaded_bytes: Optional[int] = rpc_field('uploadedBytes')
    downloaded_bytes: Optional[int] = rpc_field('downloadedBytes')
    files_added: Optional[int] = rpc_field('filesAdded')
    session_count: Optional[int] = rpc_field('sessionCount')
    seconds_active: Optional[int] = rpc_field('secondsActive')


@dataclass
class Stats(Entity):
    active_torrent_count: Optional[int] = rpc_field('activeTorrentCount')
    download_speed: Optional[int] = rpc_field('downloadSpeed')
    paused_torrent_count: Optional[int] = rpc_field('pausedTorrentCount')
    torrent_count: Optional[int] = rpc_field('torrentCount')
    upload_speed: Optional[int] = rpc_field('uploadSpeed')
    cumulative_stats: Optional[StatDetails] = rpc_field('cumulative-stats', entity=StatDetails)
    current_stats: Optional[StatDetails] = rpc_field('current-stats', entity=StatDetails)
