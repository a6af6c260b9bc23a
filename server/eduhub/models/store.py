from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.sql import func
from eduhub.database import Base


class StoreEntry(Base):
    """One persisted collection, stored whole under its logical name"""
    __tablename__ = "store_entries"
    
    key = Column(String, primary_key=True, index=True)  # "users", "courses", "config", "activationCodes"
    value = Column(JSON, nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    
    def __repr__(self):
        return f"<StoreEntry {self.key}>"
