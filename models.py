from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


@dataclass(frozen=True)
class Snapshot:
    host: str
    timestamp: datetime
    content: str


class Host(Base):
    __tablename__ = "hosts"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False, index=True)
    backups = relationship("Backup", back_populates="host", cascade="all, delete-orphan")


class Backup(Base):
    __tablename__ = "backups"
    __table_args__ = (UniqueConstraint("host_id", "taken_at"),)

    id = Column(Integer, primary_key=True)
    host_id = Column(Integer, ForeignKey("hosts.id"), nullable=False, index=True)
    taken_at = Column(DateTime, nullable=False)  # naive UTC, whole seconds
    content = Column(Text, nullable=False)
    host = relationship("Host", back_populates="backups")
