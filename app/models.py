import uuid

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def generate_uuid():
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    username = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    bio = Column(Text, nullable=True)
    email = Column(String(255), unique=True, index=True, nullable=True)  # Filled in on OAuth sign-up
    avatar_url = Column(String(500), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    accounts = relationship("Account", back_populates="user", cascade="all, delete-orphan")
    sessions = relationship("Session", back_populates="user", cascade="all, delete-orphan")
    time_intervals = relationship(
        "UserTimeInterval", back_populates="user", cascade="all, delete-orphan"
    )
    schedulings = relationship("Scheduling", back_populates="user", cascade="all, delete-orphan")


class Account(Base):
    __tablename__ = "accounts"
    __table_args__ = (
        UniqueConstraint("provider", "provider_account_id", name="uq_accounts_provider_account"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    type = Column(String(50), nullable=False)
    provider = Column(String(100), nullable=False)
    provider_account_id = Column(String(255), nullable=False)

    # OAuth tokens as returned by the provider
    refresh_token = Column(Text, nullable=True)
    access_token = Column(Text, nullable=True)
    expires_at = Column(Integer, nullable=True)  # Epoch seconds
    token_type = Column(String(50), nullable=True)
    scope = Column(Text, nullable=True)
    id_token = Column(Text, nullable=True)
    session_state = Column(String(255), nullable=True)

    user = relationship("User", back_populates="accounts")


class Session(Base):
    __tablename__ = "sessions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    session_token = Column(String(255), unique=True, index=True, nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    expires = Column(DateTime, nullable=False)

    user = relationship("User", back_populates="sessions")


class UserTimeInterval(Base):
    __tablename__ = "user_time_intervals"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    week_day = Column(Integer, nullable=False)  # 0 = Sunday ... 6 = Saturday
    time_start_in_minutes = Column(Integer, nullable=False)
    time_end_in_minutes = Column(Integer, nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    user = relationship("User", back_populates="time_intervals")


class Scheduling(Base):
    __tablename__ = "schedulings"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    date = Column(DateTime, nullable=False, index=True)  # Start of the booked hour
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    observations = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    user = relationship("User", back_populates="schedulings")
