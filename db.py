import logging
from contextlib import contextmanager
from datetime import datetime
from typing import List

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from errors import HostNotFound, SnapshotNotFound, StorageUnavailable
from models import Backup, Base, Host
from timestamps import normalize

logger = logging.getLogger(__name__)


def make_engine(url: str):
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # in-memory databases are for tests only: one connection shared by every
            # session and thread, otherwise each session would see an empty database
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True)


class SqlStore:
    """Snapshots kept in two tables: hosts, and one backups row per capture."""

    def __init__(self, url: str):
        self.url = url
        self.engine = make_engine(url)
        self.SessionLocal = sessionmaker(bind=self.engine)

    def init_db(self):
        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def _session(self):
        sess = self.SessionLocal()
        try:
            yield sess
        except SQLAlchemyError as e:
            sess.rollback()
            logger.error("Database error on %s: %s", self.engine.url, e)
            raise StorageUnavailable(f"database error: {e}") from e
        finally:
            sess.close()

    def _host(self, sess, name):
        host = sess.query(Host).filter_by(name=name).first()
        if host is None:
            raise HostNotFound(name)
        return host

    def names(self) -> List[str]:
        with self._session() as sess:
            return [r[0] for r in sess.query(Host.name).all()]

    def dates(self, host: str) -> List[datetime]:
        with self._session() as sess:
            h = self._host(sess, host)
            rows = sess.query(Backup.taken_at).filter(Backup.host_id == h.id).all()
            return [r[0] for r in rows]

    def get(self, host: str, stamp: datetime) -> str:
        stamp = normalize(stamp)
        with self._session() as sess:
            h = self._host(sess, host)
            b = sess.query(Backup).filter_by(host_id=h.id, taken_at=stamp).first()
            if b is None:
                raise SnapshotNotFound(host, stamp)
            logger.debug("Loaded %s@%s (%d chars)", host, stamp, len(b.content))
            return b.content

    def add_host(self, host: str):
        with self._session() as sess:
            if not sess.query(Host).filter_by(name=host).first():
                sess.add(Host(name=host))
                sess.commit()

    def put(self, host: str, stamp: datetime, content: str):
        stamp = normalize(stamp)
        with self._session() as sess:
            h = sess.query(Host).filter_by(name=host).first()
            if h is None:
                h = Host(name=host)
                sess.add(h)
                sess.flush()
            b = sess.query(Backup).filter_by(host_id=h.id, taken_at=stamp).first()
            # snapshots are immutable, only add if not already present
            if b is not None:
                if b.content != content:
                    logger.warning("Refusing to overwrite %s@%s", host, stamp)
                return
            sess.add(Backup(host_id=h.id, taken_at=stamp, content=content))
            sess.commit()
