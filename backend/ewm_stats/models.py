from sqlalchemy import Column, DateTime, Index, Integer, String

from ewm_stats.db import Base


class Hit(Base):
    """One recorded request to a tracked URI."""

    __tablename__ = "hits"

    id = Column(Integer, primary_key=True, index=True)
    app = Column(String(255), nullable=False)
    uri = Column(String(2048), nullable=False)
    ip = Column(String(64), nullable=False)
    timestamp = Column(DateTime, nullable=False)

    __table_args__ = (
        Index("ix_hits_uri_timestamp", "uri", "timestamp"),
    )

    def __repr__(self):
        return f"<Hit(id={self.id}, app='{self.app}', uri='{self.uri}')>"
