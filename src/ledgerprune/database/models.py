"""SQLAlchemy models for the ledger store."""

from typing import Optional
from sqlalchemy import (
    Column,
    Integer,
    String,
    Date,
    Float,
    Index,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()

# References between tables are plain integer columns: a pass may delete a line
# item that ledger entries dated after the cutoff still point at.


class DocumentHeader(Base):
    """Document header model."""

    __tablename__ = "document_headers"

    id = Column(Integer, primary_key=True)
    header_number = Column(String(64), nullable=False)
    form_date = Column(Date, nullable=True)
    partner_id = Column(Integer, nullable=True)
    form_type = Column(Integer, nullable=True)


class LineItem(Base):
    """Line item model. Quantity only ever shrinks during cleanup."""

    __tablename__ = "line_items"

    id = Column(Integer, primary_key=True)
    header_id = Column(Integer, nullable=False, index=True)
    quantity = Column(Float, nullable=False, default=0.0)


class LedgerEntry(Base):
    """Signed quantity posting against an item, location and shop."""

    __tablename__ = "ledger_entries"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, nullable=False)
    document_group_id = Column(Integer, nullable=True)
    item_id = Column(Integer, nullable=False)
    location_id = Column(Integer, nullable=False)
    shop_id = Column(Integer, nullable=False)
    entry_type = Column(Integer, nullable=False)
    quantity = Column(Float, nullable=False)
    entry_date = Column(Date, nullable=False)
    line_item_id = Column(Integer, nullable=False, index=True)

    __table_args__ = (
        Index(
            "ix_ledger_entries_group_key",
            "account_id",
            "document_group_id",
            "item_id",
            "location_id",
            "shop_id",
        ),
    )


def create_session_factory(
    database_url: str, isolation_level: Optional[str] = None
) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine_options = {"echo": False}
    if isolation_level is not None:
        engine_options["isolation_level"] = isolation_level
    engine = create_engine(database_url, **engine_options)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
