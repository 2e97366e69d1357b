import uuid
from typing import Optional

from conferencing.base import ConferencingClient
from errors import NotFoundError, ValidationError
from models import JoinInfo, JoinResponse
from sessions.store import MeetingRecord, SessionStore
from utils.logging_utils import get_logger

logger = get_logger(__name__)

# Chime limits ExternalMeetingId and ExternalUserId to 64 characters.
MAX_EXTERNAL_ID_LENGTH = 64


def external_meeting_id(title: str) -> str:
    return title[:MAX_EXTERNAL_ID_LENGTH]


def external_user_id(name: str) -> str:
    """A short random prefix keeps ids distinct; the name is kept for building the roster."""
    return f"{uuid.uuid4().hex[:8]}#{name}"[:MAX_EXTERNAL_ID_LENGTH]


class SessionRouter:
    def __init__(self, client: ConferencingClient, store: SessionStore):
        self.client = client
        self.store = store

    async def _forget(self, title: str, meeting: MeetingRecord) -> None:
        """Drop the stored record for title if it is still this meeting."""
        if await self.store.get(title) is meeting:
            await self.store.delete(title)

    async def join(self, title: Optional[str], name: Optional[str], region: Optional[str]) -> JoinResponse:
        if not title or not name or not region:
            raise ValidationError("Need parameters: title, name, region")

        async def create_meeting() -> MeetingRecord:
            logger.info("Creating meeting for title %r in %s", title, region)
            return await self.client.create_meeting(
                # A fresh token per creation; retries of this call will not create duplicates.
                client_request_token=str(uuid.uuid4()),
                media_region=region,
                external_meeting_id=external_meeting_id(title),
            )

        meeting = await self.store.get_or_create(title, create_meeting)
        try:
            attendee = await self.client.create_attendee(
                meeting_id=meeting["Meeting"]["MeetingId"],
                external_user_id=external_user_id(name),
            )
        except NotFoundError:
            # The remote side ended the meeting (e.g. after inactivity); start a new one once.
            logger.warning("Meeting for title %r no longer exists; recreating", title)
            await self._forget(title, meeting)
            meeting = await self.store.get_or_create(title, create_meeting)
            attendee = await self.client.create_attendee(
                meeting_id=meeting["Meeting"]["MeetingId"],
                external_user_id=external_user_id(name),
            )
        return JoinResponse(join_info=JoinInfo(meeting=meeting, attendee=attendee))

    async def end(self, title: Optional[str]) -> None:
        if not title:
            raise ValidationError("Need parameters: title")
        meeting = await self.store.get(title)
        if meeting is None:
            raise NotFoundError(f"Meeting not found: {title}")
        try:
            await self.client.delete_meeting(meeting_id=meeting["Meeting"]["MeetingId"])
        except NotFoundError:
            logger.warning("Meeting for title %r was already ended remotely", title)
        await self._forget(title, meeting)
        logger.info("Ended meeting for title %r", title)
