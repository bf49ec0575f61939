"""
SQLAlchemy database models for Word Scramble Bot.
Defines the database schema using async SQLAlchemy ORM.
"""
from datetime import datetime
from typing import Optional, List

from sqlalchemy import (
    String,
    Integer,
    Boolean,
    DateTime,
    ForeignKey,
    Text,
    BigInteger,
    UniqueConstraint,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
    relationship,
)


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


class ScrambleRound(Base):
    """
    One round of Word Scramble played in a channel.

    A round starts with /scramble start and ends when it is restarted
    or stopped.
    """
    __tablename__ = "scramble_rounds"

    round_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    guild_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    channel_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    host_id: Mapped[int] = mapped_column(BigInteger, nullable=False)

    root_word: Mapped[str] = mapped_column(String(100), nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    started_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    finished_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # Relationships
    words: Mapped[List["FoundWord"]] = relationship(
        "FoundWord",
        back_populates="round",
        cascade="all, delete-orphan",
        lazy="selectin"
    )


class FoundWord(Base):
    """An accepted word and the player who found it."""
    __tablename__ = "found_words"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    round_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("scramble_rounds.round_id", ondelete="CASCADE"), nullable=False
    )
    word: Mapped[str] = mapped_column(String(100), nullable=False)
    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False)

    found_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    # Relationships
    round: Mapped["ScrambleRound"] = relationship("ScrambleRound", back_populates="words")

    __table_args__ = (
        UniqueConstraint("round_id", "word", name="unique_word_per_round"),
    )


class WordCache(Base):
    """
    Cache of dictionary answers.

    Only definite answers are stored; lookups that failed are retried.
    """
    __tablename__ = "word_cache"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    word: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    language: Mapped[str] = mapped_column(String(10), nullable=False, default="en")

    is_valid: Mapped[bool] = mapped_column(Boolean, nullable=False)
    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    validated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    __table_args__ = (
        UniqueConstraint("word", "language", name="unique_word_per_language"),
    )


class PlayerStats(Base):
    """
    Aggregated statistics for players.

    Tracks performance across all rounds in a guild.
    """
    __tablename__ = "player_stats"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    guild_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)

    rounds_played: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    words_found: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rejected_attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    longest_word: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    __table_args__ = (
        UniqueConstraint("user_id", "guild_id", name="unique_user_per_guild"),
    )
