from __future__ import annotations

import threading
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Iterator, Optional

from loguru import logger
from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from codeassist.models.base import utc_now
from codeassist.models.chat_message import ChatMessage
from codeassist.models.chat_session import ChatSession
from codeassist.models.enums import ChatRole

_TICK = timedelta(microseconds=1)


class SessionStore:
    """Chat sessions and their append-only message lists.

    Every operation holds ``lock`` for its whole unit of work. The in-memory
    database lives on a single connection, so stores sharing an engine must
    share the lock too.
    """

    def __init__(self, engine: Engine, lock: Optional[threading.RLock] = None) -> None:
        self._engine = engine
        self._lock = lock or threading.RLock()
        self._last_ts: datetime | None = None

    @contextmanager
    def _session(self) -> Iterator[Session]:
        with self._lock, Session(self._engine, expire_on_commit=False) as session:
            yield session

    def _now(self) -> datetime:
        # strictly increasing, so updated_at ordering never ties; caller holds the lock
        now = utc_now()
        if self._last_ts is not None and now <= self._last_ts:
            now = self._last_ts + _TICK
        self._last_ts = now
        return now

    def create_session(self, session_id: str, title: str) -> ChatSession:
        with self._session() as session:
            now = self._now()
            record = session.get(ChatSession, session_id)
            if record:
                # duplicate ids upsert the title instead of failing
                record.title = title
                record.updated_at = now
            else:
                record = ChatSession(id=session_id, title=title, created_at=now, updated_at=now)
            session.add(record)
            session.commit()
            session.refresh(record)
        logger.debug('session_store.session_saved', session_id=session_id)
        return record

    def get_session(self, session_id: str) -> Optional[ChatSession]:
        with self._session() as session:
            return session.get(ChatSession, session_id)

    def list_sessions(self) -> list[ChatSession]:
        statement = select(ChatSession).order_by(ChatSession.updated_at.desc())
        with self._session() as session:
            return list(session.exec(statement).all())

    def update_session_title(self, session_id: str, title: str) -> Optional[ChatSession]:
        with self._session() as session:
            record = session.get(ChatSession, session_id)
            if not record:
                return None
            record.title = title
            record.updated_at = self._now()
            session.add(record)
            session.commit()
            session.refresh(record)
            return record

    def touch_session(self, session_id: str) -> Optional[ChatSession]:
        with self._session() as session:
            record = session.get(ChatSession, session_id)
            if not record:
                return None
            record.updated_at = self._now()
            session.add(record)
            session.commit()
            session.refresh(record)
            return record

    def _delete_messages(self, session: Session, session_id: str) -> None:
        messages = session.exec(select(ChatMessage).where(ChatMessage.session_id == session_id)).all()
        for message in messages:
            session.delete(message)

    def delete_session(self, session_id: str) -> None:
        with self._session() as session:
            self._delete_messages(session, session_id)
            record = session.get(ChatSession, session_id)
            if record:
                session.delete(record)
            session.commit()
        logger.debug('session_store.session_deleted', session_id=session_id)

    def append_message(self, session_id: str, content: str, role: ChatRole) -> ChatMessage:
        with self._session() as session:
            now = self._now()
            record = ChatMessage(session_id=session_id, content=content, role=role, timestamp=now)
            session.add(record)
            owner = session.get(ChatSession, session_id)
            if owner:
                owner.updated_at = now
                session.add(owner)
            session.commit()
            session.refresh(record)
            return record

    def list_messages(self, session_id: str) -> list[ChatMessage]:
        statement = (
            select(ChatMessage)
            .where(ChatMessage.session_id == session_id)
            .order_by(ChatMessage.id.asc())
        )
        with self._session() as session:
            return list(session.exec(statement).all())

    def clear_messages(self, session_id: str) -> None:
        with self._session() as session:
            self._delete_messages(session, session_id)
            session.commit()
