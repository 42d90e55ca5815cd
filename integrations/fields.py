"""Protocol field names accepted by ``torrent-get`` and ``session-get``."""

TORRENT_ALL_FIELDS = [
    'activityDate',
    'addedDate',
    'bandwidthPriority',
    'comment',
    'corruptEver',
    'creator',
    'dateCreated',
    'desiredAvailable',
    'doneDate',
    'downloadDir',
    'downloadedEver',
    'downloadLimit',
    'downloadLimited',
    'editDate',
    'error',
    'errorString',
    'eta',
    'etaIdle',
    'files',
    'fileStats',
    'hashString',
    'haveUnchecked',
    'haveValid',
    'honorsSessionLimits',
    'id',
    'isFinished',
    'isPrivate',
    'isStalled',
    'labels',
    'leftUntilDone',
    'magnetLink',
    'manualAnnounceTime',
    'maxConnectedPeers',
    'metadataPercentComplete',
    'name',
    'peer-limit',
    'peers',
    'peersConnected',
    'peersFrom',
    'peersGettingFromUs',
    'peersSendingToUs',
    'percentDone',
    'pieces',
    'pieceCount',
    'pieceSize',
    'priorities',
    'queuePosition',
    'rateDownload',
    'rateUpload',
    'recheckProgress',
    'secondsDownloading',
    'secondsSeeding',
    'seedIdleLimit',
    'seedIdleMode',
    'seedRatioLimit',
    'seedRatioMode',
    'sizeWhenDone',
    'startDate',
    'status',
    'trackers',
    'trackerStats',
    'totalSize',
    'torrentFile',
    'uploadedEver',
    'uploadLimit',
    'uploadLimited',
    'uploadRatio',
    'wanted',
    'webseeds',
    'webseedsSendingToUs',
]

# Enough to render a one-line listing.
TORRENT_SUMMARY_FIELDS = [
    'id',
    'name',
    'hashString',
    'status',
    'percentDone',
    'rateDownload',
    'rateUpload',
    'error',
    'errorString',
]

SESSION_ALL_FIELDS = [
    'alt-speed-down',
    'alt-speed-enabled',
    'alt-speed-time-begin',
    'alt-speed-time-day',
    'alt-speed-time-enabled',
    'alt-speed-time-end',
    'alt-speed-up',
    'blocklist-enabled',
    'blocklist-size',
    'blocklist-url',
    'cache-size-mb',
    'config-dir',
    'dht-enabled',
    'download-dir',
    'download-queue-enabled',
    'download-queue-size',
    'encryption',
    'idle-seeding-limit',
    'idle-seeding-limit-enabled',
    'incomplete-dir',
    'incomplete-dir-enabled',
    'lpd-enabled',
    'peer-limit-global',
    'peer-limit-per-torrent',
    'peer-port',
    'peer-port-random-on-start',
    'pex-enabled',
    'port-forwarding-enabled',
    'queue-stalled-enabled',
    'queue-stalled-minutes',
    'rename-partial-files',
    'rpc-version',
    'rpc-version-minimum',
    'rpc-version-semver',
    'script-torrent-done-enabled',
    'script-torrent-done-filename',
    'seed-queue-enabled',
    'seed-queue-size',
    'seedRatioLimit',
    'seedRatioLimited',
    'session-id',
    'speed-limit-down',
    'speed-limit-down-enabled',
    'speed-limit-up',
    'speed-limit-up-enabled',
    'start-added-torrents',
    'trash-original-torrent-files',
    'units',
    'utp-enabled',
    'version',
]
