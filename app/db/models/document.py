from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.sql import func

from app.db.base import Base


class DocumentModel(Base):
    __tablename__ = "documents"

    path = Column(String(1024), primary_key=True)
    collection = Column(String(1024), index=True, nullable=False)
    doc_id = Column(String(255), nullable=False)
    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
