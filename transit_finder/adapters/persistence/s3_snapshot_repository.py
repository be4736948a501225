from __future__ import annotations

import json
import os
from dataclasses import dataclass, field

from botocore.exceptions import BotoCoreError, ClientError

from transit_finder.adapters.aws import s3_client
from transit_finder.app.ports.output import INetworkSnapshotRepository
from transit_finder.domain.exceptions import SnapshotUnavailable
from transit_finder.domain.models import NetworkKind, NetworkSnapshot

from .snapshot_codec import SNAPSHOT_FILENAMES, snapshot_from_dict, snapshot_to_dict


@dataclass(slots=True)
class S3SnapshotRepository(INetworkSnapshotRepository):
    """Network snapshots stored as JSON objects in S3.

    Env vars:
      - NETWORK_SNAPSHOT_BUCKET: bucket name
      - NETWORK_SNAPSHOT_PREFIX: key prefix (default: networks/)
      - ENDPOINT_URL / USE_LOCALSTACK: LocalStack endpoint selection
      - AWS_REGION: defaults to ap-south-1
    """

    bucket: str | None = None
    prefix: str | None = None

    _loaded: dict[NetworkKind, NetworkSnapshot] = field(
        default_factory=dict, init=False, repr=False
    )

    def _bucket(self) -> str:
        value = self.bucket or os.getenv("NETWORK_SNAPSHOT_BUCKET")
        if not value:
            raise RuntimeError("Missing NETWORK_SNAPSHOT_BUCKET")
        return value

    def key_for(self, kind: NetworkKind) -> str:
        prefix = self.prefix
        if prefix is None:
            prefix = os.getenv("NETWORK_SNAPSHOT_PREFIX", "networks/")
        if prefix and not prefix.endswith("/"):
            prefix += "/"
        return f"{prefix}{SNAPSHOT_FILENAMES[kind]}"

    def load_snapshot(self, kind: NetworkKind) -> NetworkSnapshot:
        cached = self._loaded.get(kind)
        if cached is not None:
            return cached

        bucket = self._bucket()
        key = self.key_for(kind)
        try:
            obj = s3_client().get_object(Bucket=bucket, Key=key)
            payload = json.loads(obj["Body"].read())
        except (BotoCoreError, ClientError, ValueError) as exc:
            raise SnapshotUnavailable(
                f"Could not read s3://{bucket}/{key}: {exc}"
            ) from exc

        snapshot = snapshot_from_dict(kind, payload)
        self._loaded[kind] = snapshot
        return snapshot

    def save_snapshot(self, snapshot: NetworkSnapshot) -> None:
        body = json.dumps(snapshot_to_dict(snapshot), ensure_ascii=False).encode("utf-8")
        s3_client().put_object(
            Bucket=self._bucket(),
            Key=self.key_for(snapshot.kind),
            Body=body,
            ContentType="application/json",
        )
        self._loaded[snapshot.kind] = snapshot
