from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from loguru import logger
from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from codeassist.models.model_config import ModelConfig

_MUTABLE_FIELDS = {
    'model_name',
    'base_model',
    'fine_tuning_method',
    'deployment_platform',
    'parameters',
    'is_active',
}


class ConfigStore:
    """Named model configurations; at most one of them is active."""

    def __init__(self, engine: Engine, lock: Optional[threading.RLock] = None) -> None:
        self._engine = engine
        self._lock = lock or threading.RLock()

    @contextmanager
    def _session(self) -> Iterator[Session]:
        with self._lock, Session(self._engine, expire_on_commit=False) as session:
            yield session

    def _deactivate_others(self, session: Session, keep_id: Optional[int]) -> None:
        statement = select(ModelConfig).where(ModelConfig.is_active == True)  # noqa: E712
        for record in session.exec(statement).all():
            if record.id == keep_id:
                continue
            record.is_active = False
            session.add(record)

    def _save(self, session: Session, record: ModelConfig, activating: bool) -> ModelConfig:
        # the deactivation scan and the write share one transaction
        if activating:
            self._deactivate_others(session, record.id)
        session.add(record)
        session.commit()
        session.refresh(record)
        return record

    def list_configs(self) -> list[ModelConfig]:
        with self._session() as session:
            return list(session.exec(select(ModelConfig).order_by(ModelConfig.id.asc())).all())

    def get_config(self, config_id: int) -> Optional[ModelConfig]:
        with self._session() as session:
            return session.get(ModelConfig, config_id)

    def get_active_config(self) -> Optional[ModelConfig]:
        statement = select(ModelConfig).where(ModelConfig.is_active == True)  # noqa: E712
        with self._session() as session:
            return session.exec(statement).first()

    def create_config(self, fields: dict[str, Any]) -> ModelConfig:
        values = {key: value for key, value in fields.items() if key in _MUTABLE_FIELDS}
        values['is_active'] = bool(values.get('is_active') or False)
        record = ModelConfig(**values)
        with self._session() as session:
            record = self._save(session, record, activating=record.is_active)
        logger.debug('config_store.created', config_id=record.id, active=record.is_active)
        return record

    def update_config(self, config_id: int, fields: dict[str, Any]) -> Optional[ModelConfig]:
        with self._session() as session:
            record = session.get(ModelConfig, config_id)
            if not record:
                return None
            was_active = record.is_active
            for key, value in fields.items():
                if key not in _MUTABLE_FIELDS or value is None:
                    continue
                setattr(record, key, value)
            activating = bool(record.is_active) and not was_active
            record = self._save(session, record, activating=activating)
        if activating:
            logger.info('config_store.activated', config_id=record.id, model_name=record.model_name)
        return record

    def set_active_config(self, config_id: int) -> Optional[ModelConfig]:
        return self.update_config(config_id, {'is_active': True})

    def delete_config(self, config_id: int) -> None:
        with self._session() as session:
            record = session.get(ModelConfig, config_id)
            if record:
                session.delete(record)
                session.commit()
