"""
Chat service orchestrator.

Session and message use cases shared by the visitor and staff APIs:
create-or-resume, sending with unread bookkeeping, cursor pagination,
and read receipts.

Dependencies: support_desk.boundary.db.CRUD, support_desk.application.services.queue_service
System role: Conversation use case orchestration
"""

import logging
import random
from typing import Sequence
from uuid import UUID, uuid4

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from support_desk.application.services.queue_service import QueueService
from support_desk.boundary.db.CRUD.message_crud import message_crud
from support_desk.boundary.db.CRUD.session_crud import session_crud
from support_desk.boundary.db.models.message_model import ContentType, MessageModel, SenderType
from support_desk.boundary.db.models.session_model import SessionModel, SessionStatus
from support_desk.core.exceptions import SessionNotFoundError

logger = logging.getLogger(__name__)

NAME_ADJECTIVES = ("Happy", "Clever", "Swift", "Bright", "Calm", "Eager", "Gentle", "Kind")
NAME_ANIMALS = ("Panda", "Tiger", "Eagle", "Dolphin", "Fox", "Owl", "Bear", "Wolf")


def generate_visitor_name(rng: random.Random | None = None) -> str:
    """Random friendly display name such as `CalmOwl42`."""
    rng = rng or random
    return f"{rng.choice(NAME_ADJECTIVES)}{rng.choice(NAME_ANIMALS)}{rng.randint(0, 999)}"


class ChatService:
    """Conversation use cases over sessions and messages."""

    def __init__(self, db: AsyncSession, queue_service: QueueService | None = None) -> None:
        """
        Initialize chat service with async database session.

        Args:
            db: Async SQLAlchemy session
            queue_service: Queue service sharing the same session
        """
        self.db = db
        self.queue_service = queue_service or QueueService(db)

    async def create_or_get_session(
        self,
        visitor_name: str | None = None,
        session_id: UUID | None = None,
    ) -> SessionModel:
        """
        Resume an existing session or create a new one.

        An existing session is returned unchanged (the name is not
        updated). New sessions join the back of the queue.

        Args:
            visitor_name: Display name (generated when None)
            session_id: ID to resume, or to create the session with

        Returns:
            SessionModel: Existing or newly created session
        """
        if session_id is not None:
            existing = await session_crud.get_by_id(self.db, session_id)
            if existing:
                return existing

        try:
            chat_session = await session_crud.create(
                self.db,
                id=session_id or uuid4(),
                visitor_name=visitor_name or generate_visitor_name(),
                status=SessionStatus.ACTIVE,
            )
        except IntegrityError:
            # Another request created the same client-supplied ID first.
            await self.db.rollback()
            existing = await session_crud.get_by_id(self.db, session_id)
            if existing is None:
                raise
            return existing

        await self.queue_service.update_session_queue_info(chat_session.id)
        await self.db.commit()
        await self.db.refresh(chat_session)

        logger.info(
            "Session created",
            extra={"session_id": str(chat_session.id), "visitor_name": chat_session.visitor_name},
        )
        return chat_session

    async def get_session(self, session_id: UUID) -> SessionModel:
        """
        Get session by ID.

        Raises:
            SessionNotFoundError: If the session does not exist
        """
        chat_session = await session_crud.get_by_id(self.db, session_id)
        if chat_session is None:
            raise SessionNotFoundError(str(session_id))
        return chat_session

    async def list_sessions(self, status: SessionStatus | None = None) -> Sequence[SessionModel]:
        return await session_crud.list_by_status(self.db, status)

    async def send_message(
        self,
        session_id: UUID,
        sender_type: SenderType,
        content_type: ContentType,
        content: str,
        thumbnail_url: str | None = None,
        file_name: str | None = None,
        file_size: int | None = None,
    ) -> tuple[MessageModel, SessionModel]:
        """
        Append a message and bump the recipient's unread counter.

        The insert and the session update commit together.

        Args:
            session_id: Target session
            sender_type: Author (visitor or staff)
            content_type: Payload kind
            content: Text body or file URL
            thumbnail_url: Optional preview URL
            file_name: Original file name for attachments
            file_size: Attachment size in bytes

        Returns:
            tuple: (created message, updated session)

        Raises:
            SessionNotFoundError: If the session does not exist
        """
        chat_session = await session_crud.record_message(self.db, session_id, sender_type)
        if chat_session is None:
            await self.db.rollback()
            raise SessionNotFoundError(str(session_id))

        message = await message_crud.create(
            self.db,
            session_id=session_id,
            sender_type=sender_type,
            content_type=content_type,
            content=content,
            thumbnail_url=thumbnail_url,
            file_name=file_name,
            file_size=file_size,
            is_read=False,
        )
        await self.db.commit()

        logger.info(
            "Message stored",
            extra={
                "session_id": str(session_id),
                "message_id": message.id,
                "sender_type": sender_type.value,
                "content_type": content_type.value,
            },
        )
        return message, chat_session

    async def get_messages(
        self,
        session_id: UUID,
        before: int | None = None,
        limit: int = 20,
    ) -> tuple[list[MessageModel], bool]:
        """
        One page of history, oldest first.

        Args:
            session_id: Session UUID
            before: Cursor; only messages with a smaller ID are returned
            limit: Page size

        Returns:
            tuple: (messages, has_more)
        """
        return await message_crud.get_page(self.db, session_id, before=before, limit=limit)

    async def mark_as_read(self, session_id: UUID, reader: SenderType) -> SessionModel | None:
        """
        Mark the other party's messages read and zero the reader's counter.

        Idempotent, and a no-op for unknown sessions.

        Args:
            session_id: Session UUID
            reader: Party doing the reading

        Returns:
            SessionModel | None: Updated session, None if it does not exist
        """
        flipped = await message_crud.mark_read_from(self.db, session_id, reader.counterpart)
        chat_session = await session_crud.reset_unread(self.db, session_id, reader)
        await self.db.commit()
        logger.debug(
            "Messages marked read",
            extra={"session_id": str(session_id), "reader": reader.value, "count": flipped},
        )
        return chat_session
