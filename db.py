# db.py
from datetime import datetime

from sqlalchemy import (
    create_engine,
    Column,
    Integer,
    String,
    JSON,
    UniqueConstraint,
    DateTime,
    Index,
)
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


class Document(Base):
    """
    One row per document, for every collection (seasons, teams, matches,
    rosters, players, playerStats, trades, users, matchDates).

    The payload lives in `data`; `season_id` mirrors data["seasonId"] so the
    season-scoped queries do not have to scan whole collections.
    """
    __tablename__ = "documents"

    id = Column(Integer, primary_key=True)
    collection = Column(String, index=True, nullable=False)
    doc_id = Column(String, nullable=False)
    season_id = Column(String, index=True, nullable=True)
    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("collection", "doc_id", name="uix_collection_doc"),
        Index("ix_documents_collection_season", "collection", "season_id"),
    )


def make_engine(url: str):
    # in-memory sqlite: every session must see the same connection
    if url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(
            url,
            future=True,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if url.startswith("sqlite"):
        return create_engine(url, future=True, echo=False, connect_args={"check_same_thread": False})
    return create_engine(url, future=True, echo=False)


def make_session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


def init_db(bind):
    Base.metadata.create_all(bind=bind)
