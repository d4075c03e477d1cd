# backend/reports_studio/models/store_entry.py
from sqlalchemy import Column, String, Text, Integer, DateTime
from sqlalchemy.sql import func

from reports_studio.db.base_class import Base


class StoreEntry(Base):
    # __tablename__ will be 'storeentrys'

    key = Column(String(128), primary_key=True, index=True)
    schema_version = Column(Integer, nullable=False, default=1)
    value_json = Column(Text, nullable=False)
    saved_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<StoreEntry(key='{self.key}', schema_version={self.schema_version})>"
