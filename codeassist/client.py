from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Literal, Optional
from uuid import uuid4

import requests
from loguru import logger

Sender = Literal['user', 'bot']

TRANSPORT_FAILURE_TEXT = 'Sorry, I could not reach the assistant. Please check your connection and try again.'


@dataclass(frozen=True)
class ClientSideMessage:
    id: str
    content: str
    sender: Sender
    timestamp: datetime


@dataclass(frozen=True)
class ClientSettings:
    temperature: float = 0.2
    max_length: int = 8192
    syntax_highlighting: bool = True
    dark_mode: bool = True
    auto_scroll: bool = True

    def to_payload(self) -> dict[str, Any]:
        return {
            'temperature': self.temperature,
            'maxLength': self.max_length,
            'syntaxHighlighting': self.syntax_highlighting,
            'darkMode': self.dark_mode,
            'autoScroll': self.auto_scroll,
        }


def _parse_timestamp(raw: Any) -> datetime:
    if isinstance(raw, str):
        try:
            return datetime.fromisoformat(raw.replace('Z', '+00:00'))
        except ValueError:
            pass
    return datetime.now(timezone.utc)


def to_client_message(payload: dict[str, Any]) -> ClientSideMessage:
    """Server messages carry ``role``; the client view renames ``assistant`` to ``bot``."""
    return ClientSideMessage(
        id=str(payload.get('id')),
        content=payload.get('content', ''),
        sender='user' if payload.get('role') == 'user' else 'bot',
        timestamp=_parse_timestamp(payload.get('timestamp')),
    )


@dataclass
class ClientSession:
    """Conversation state of one chat window, synced with the API over HTTP."""

    base_url: str = 'http://127.0.0.1:8000'
    session_id: str = field(default_factory=lambda: str(uuid4()))
    settings: ClientSettings = field(default_factory=ClientSettings)
    http: requests.Session = field(default_factory=requests.Session)
    timeout: float = 120.0
    messages: list[ClientSideMessage] = field(default_factory=list)
    is_loading: bool = False
    last_error: Optional[str] = None

    def _url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/api{path}"

    def _request(self, method: str, path: str, payload: Any = None) -> dict[str, Any]:
        kwargs: dict[str, Any] = {'timeout': self.timeout}
        if payload is not None:
            kwargs['json'] = payload
        response = self.http.request(method, self._url(path), **kwargs)
        response.raise_for_status()
        return response.json()

    def _local_message(self, content: str, sender: Sender) -> ClientSideMessage:
        message = ClientSideMessage(
            id=str(uuid4()),
            content=content,
            sender=sender,
            timestamp=datetime.now(timezone.utc),
        )
        self.messages.append(message)
        return message

    def send(self, text: str) -> ClientSideMessage:
        if not text.strip():
            raise ValueError('message is empty')
        self._local_message(text, 'user')
        self.is_loading = True
        self.last_error = None
        try:
            data = self._request(
                'POST',
                '/chat',
                {'message': text, 'sessionId': self.session_id, 'settings': self.settings.to_payload()},
            )
        except requests.RequestException as exc:
            logger.warning('client.send_failed', session_id=self.session_id, error=str(exc))
            self.last_error = str(exc)
            return self._local_message(TRANSPORT_FAILURE_TEXT, 'bot')
        finally:
            self.is_loading = False
        self.session_id = data.get('sessionId', self.session_id)
        if data.get('error'):
            self.last_error = data.get('response')
        return self._local_message(data.get('response', ''), 'bot')

    def load(self, session_id: Optional[str] = None) -> list[ClientSideMessage]:
        if session_id:
            self.session_id = session_id
        data = self._request('GET', f'/chat/{self.session_id}')
        self.messages = [to_client_message(item) for item in data.get('messages', [])]
        return list(self.messages)

    def clear(self) -> None:
        self._request('DELETE', f'/chat/{self.session_id}')
        self.messages = []

    def new_session(self, title: Optional[str] = None) -> dict[str, Any]:
        payload = {'title': title} if title is not None else {}
        session = self._request('POST', '/sessions', payload)['session']
        self.session_id = session['id']
        self.messages = []
        return session

    def list_sessions(self) -> list[dict[str, Any]]:
        return self._request('GET', '/sessions').get('sessions', [])

    def rename(self, title: str) -> dict[str, Any]:
        return self._request('PATCH', f'/sessions/{self.session_id}', {'title': title})['session']

    def delete(self) -> None:
        self._request('DELETE', f'/sessions/{self.session_id}')
        self.session_id = str(uuid4())
        self.messages = []

    def update_settings(self, **changes: Any) -> ClientSettings:
        updated = replace(self.settings, **changes)
        self._request(
            'POST',
            '/settings',
            {'temperature': updated.temperature, 'maxLength': updated.max_length},
        )
        self.settings = updated
        return updated
