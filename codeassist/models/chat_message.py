from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from codeassist.models.base import timestamp_field
from codeassist.models.enums import ChatRole, enum_column


class ChatMessage(SQLModel, table=True):
    __tablename__ = 'chat_messages'

    # sqlite AUTOINCREMENT keeps ids increasing across the whole table,
    # even after the highest rows are deleted
    __table_args__ = {'sqlite_autoincrement': True}

    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: str = Field(index=True)
    role: ChatRole = Field(sa_column=enum_column(ChatRole, 'chat_role'))
    content: str
    timestamp: datetime = timestamp_field()
