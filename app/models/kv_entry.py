from sqlalchemy import Column, String, Text
from app.database import Base

MAX_KEY_LENGTH = 512


class KVEntry(Base):
    __tablename__ = "kv_entries"
    namespace = Column(String(64), primary_key=True)
    key = Column(String(MAX_KEY_LENGTH), primary_key=True)
    value = Column(Text, nullable=False)
