from sqlalchemy.engine import Engine
from sqlmodel import SQLModel

from codeassist.models import (  # noqa: F401
    chat_message,
    chat_session,
    model_config,
)


def init_db(engine: Engine, drop_all: bool = False) -> None:
    if drop_all:
        SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
