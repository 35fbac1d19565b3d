from codeassist.models.base import TimestampModel
from codeassist.models.chat_session import ChatSession
from codeassist.models.chat_message import ChatMessage
from codeassist.models.model_config import ModelConfig

__all__ = [
    'TimestampModel',
    'ChatSession',
    'ChatMessage',
    'ModelConfig',
]
