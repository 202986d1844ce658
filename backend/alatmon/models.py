from sqlalchemy import Column, BigInteger, Integer, String, Text, JSON, DateTime, Index
from sqlalchemy.sql import func
from .db import Base

# sqlite only autoincrements INTEGER primary keys
PK = BigInteger().with_variant(Integer, "sqlite")

class User(Base):
    __tablename__ = "user"
    id = Column(PK, primary_key=True)
    username = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False)
    no_telp = Column(String)
    password_hash = Column("password", Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

class DataAlat(Base):
    __tablename__ = "dataalat"
    id = Column(PK, primary_key=True)
    username = Column(String, nullable=False, index=True)  # owner
    nama_anak = Column(String, nullable=False)
    usia = Column(Integer)
    jeniskelamin = Column(String)
    idalat = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "nama_anak": self.nama_anak,
            "usia": self.usia,
            "jeniskelamin": self.jeniskelamin,
            "idalat": self.idalat,
        }

class Monitoring(Base):
    """Live readings; rows are appended until the device's streak is archived."""
    __tablename__ = "monitoring"
    id = Column(PK, primary_key=True)
    idalat = Column(String, nullable=False)
    payload = Column(JSON, nullable=False, default=dict)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    __table_args__ = (Index("ix_monitoring_idalat_updated_at", "idalat", "updated_at"),)

    def to_dict(self):
        return {
            "id": self.id,
            "idalat": self.idalat,
            "payload": self.payload,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

class History(Base):
    __tablename__ = "history"
    id = Column(PK, primary_key=True)
    idalat = Column(String, nullable=False, index=True)
    created_at = Column(DateTime, nullable=False)  # WIB wall clock, see timeutil.to_wib
    duration = Column(Integer, nullable=False)
