from sqlmodel import Field, SQLModel

from codeassist.models.base import TimestampModel


class ChatSession(TimestampModel, SQLModel, table=True):
    __tablename__ = 'chat_sessions'

    id: str = Field(primary_key=True)
    title: str
