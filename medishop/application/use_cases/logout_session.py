from __future__ import annotations

from medishop.application.dto.auth import LogoutInput
from medishop.application.ports.session_port import SessionPort
from medishop.application.ports.token_port import TokenPort


class LogoutSessionUseCase:
    def __init__(self, *, session_port: SessionPort, token_port: TokenPort):
        self._session_port = session_port
        self._token_port = token_port

    def execute(self, command: LogoutInput) -> None:
        token = (command.session_token or "").strip()
        if not token:
            return
        session_id = self._token_port.hash_session_token(session_token=token)
        self._session_port.delete_session(session_id=session_id)
