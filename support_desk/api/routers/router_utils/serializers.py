"""
ORM to wire-format helpers.

Produces the camelCase JSON dicts pushed over SSE and returned in
response envelopes.
"""

from support_desk.boundary.db.models.message_model import MessageModel
from support_desk.boundary.db.models.session_model import SessionModel
from support_desk.models.message import MessageResponse
from support_desk.models.session import SessionResponse


def message_payload(message: MessageModel) -> dict:
    return MessageResponse.model_validate(message).to_json_dict()


def session_payload(chat_session: SessionModel) -> dict:
    return SessionResponse.model_validate(chat_session).to_json_dict()
