from .local_snapshot_repository import LocalSnapshotRepository
from .s3_snapshot_repository import S3SnapshotRepository
from .snapshot_station_source import SnapshotStationSource

__all__ = [
    "LocalSnapshotRepository",
    "S3SnapshotRepository",
    "SnapshotStationSource",
]
