from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Optional

from fastapi import Request
from sqlalchemy.engine import Engine

from codeassist.core.config import Settings, settings as default_settings
from codeassist.core.providers import get_provider_registry
from codeassist.db.init_db import init_db
from codeassist.db.session import create_memory_engine
from codeassist.services.ai_prompts import load_system_prompt
from codeassist.services.config_seed import seed_model_configs
from codeassist.services.config_store import ConfigStore
from codeassist.services.model_gateway import GenerationSettings, ModelFactory, ModelGateway
from codeassist.services.session_store import SessionStore


@dataclass
class AppContext:
    """Process-wide state handed to request handlers."""

    engine: Engine
    store_lock: threading.RLock
    sessions: SessionStore
    configs: ConfigStore
    gateway: ModelGateway


def build_context(
    config: Optional[Settings] = None,
    *,
    model_factory: Optional[ModelFactory] = None,
) -> AppContext:
    config = config or default_settings
    engine = create_memory_engine()
    init_db(engine)
    # the memory database is one connection; both stores serialize on it
    store_lock = threading.RLock()

    configs = ConfigStore(engine, store_lock)
    if config.SEED_MODEL_CONFIGS:
        seed_model_configs(configs)

    gateway_kwargs = {}
    if model_factory is not None:
        gateway_kwargs['model_factory'] = model_factory
    gateway = ModelGateway(
        model_id=get_provider_registry().resolve_model_id(config.DEFAULT_MODEL),
        instructions=load_system_prompt(config.SYSTEM_PROMPT_PATH),
        settings=GenerationSettings(
            temperature=config.DEFAULT_TEMPERATURE,
            max_output_tokens=config.DEFAULT_MAX_OUTPUT_TOKENS,
        ),
        max_input_chars=config.MAX_INPUT_CHARS,
        history_limit=config.GATEWAY_HISTORY_LIMIT,
        **gateway_kwargs,
    )
    return AppContext(
        engine=engine,
        store_lock=store_lock,
        sessions=SessionStore(engine, store_lock),
        configs=configs,
        gateway=gateway,
    )


def get_context(request: Request) -> AppContext:
    return request.app.state.context
