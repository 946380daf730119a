import logging
import os
from datetime import datetime
from pathlib import Path
from typing import List

from errors import HostNotFound, MalformedTimestamp, SnapshotNotFound, StorageUnavailable
from timestamps import format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)


class FileStore:
    """
    Snapshots on disk, one directory per host and one file per capture:

        <root>/<host>/<YYYYmmddTHHMMSS>

    The collector writes files here; the browser only reads them.
    """

    def __init__(self, root):
        self.root = Path(root)

    def _host_dir(self, host: str) -> Path:
        # host names become path components
        if not host or host.startswith(".") or "/" in host or os.sep in host:
            raise HostNotFound(host)
        return self.root / host

    def names(self) -> List[str]:
        try:
            if not self.root.exists():
                return []
            return [p.name for p in self.root.iterdir() if p.is_dir() and not p.name.startswith(".")]
        except OSError as e:
            logger.error("Cannot list %s: %s", self.root, e)
            raise StorageUnavailable(f"cannot list hosts: {e}") from e

    def dates(self, host: str) -> List[datetime]:
        d = self._host_dir(host)
        try:
            if not d.is_dir():
                raise HostNotFound(host)
            out = []
            for p in d.iterdir():
                if not p.is_file():
                    continue
                try:
                    out.append(parse_timestamp(p.name))
                except MalformedTimestamp:
                    logger.warning("Ignoring stray file %s", p)
            return out
        except OSError as e:
            logger.error("Cannot list %s: %s", d, e)
            raise StorageUnavailable(f"cannot list snapshots for {host}: {e}") from e

    def get(self, host: str, stamp: datetime) -> str:
        d = self._host_dir(host)
        path = d / format_timestamp(stamp)
        try:
            if not d.is_dir():
                raise HostNotFound(host)
            if not path.is_file():
                raise SnapshotNotFound(host, stamp)
            return path.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Cannot read %s: %s", path, e)
            raise StorageUnavailable(f"cannot read {path.name} for {host}: {e}") from e

    def add_host(self, host: str):
        d = self._host_dir(host)
        try:
            d.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageUnavailable(f"cannot create {d}: {e}") from e

    def put(self, host: str, stamp: datetime, content: str):
        self.add_host(host)
        path = self._host_dir(host) / format_timestamp(stamp)
        if path.exists():
            logger.warning("Refusing to overwrite %s", path)
            return
        tmp = path.with_suffix(".tmp")
        try:
            with open(tmp, "wb") as f:
                f.write(content.encode("utf-8"))
            tmp.replace(path)
        except OSError as e:
            raise StorageUnavailable(f"cannot write {path}: {e}") from e
