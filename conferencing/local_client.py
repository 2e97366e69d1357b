import uuid
from typing import Any, Dict

from conferencing.base import ConferencingClient
from errors import NotFoundError
from utils.logging_utils import get_logger

logger = get_logger(__name__)


class LocalConferencingClient(ConferencingClient):
    """
    In-process stand-in for the conferencing control plane.

    Used when DEBUG is set so the router can be exercised without cloud
    credentials. Identifiers are fabricated; no media is ever routed.
    """

    def __init__(self):
        self.meetings: Dict[str, Dict[str, Any]] = {}
        self.attendees: Dict[str, Dict[str, Dict[str, Any]]] = {}

    async def create_meeting(
        self, client_request_token: str, media_region: str, external_meeting_id: str
    ) -> Dict[str, Any]:
        meeting_id = str(uuid.uuid4())
        meeting = {
            "MeetingId": meeting_id,
            "ExternalMeetingId": external_meeting_id,
            "MediaRegion": media_region,
            "MediaPlacement": {
                "AudioHostUrl": f"{meeting_id}.k.m3.ue1.app.chime.aws:3478",
                "ScreenDataUrl": f"wss://bitpw.m3.ue1.app.chime.aws:443/v2/screen/{meeting_id}",
                "SignalingUrl": f"wss://signal.m3.ue1.app.chime.aws/control/{meeting_id}",
                "TurnControlUrl": "https://ccp.cp.ue1.app.chime.aws/v2/turn_sessions",
            },
        }
        self.meetings[meeting_id] = meeting
        self.attendees[meeting_id] = {}
        logger.info("Local meeting %s created for %s", meeting_id, external_meeting_id)
        return {"Meeting": meeting}

    async def create_attendee(self, meeting_id: str, external_user_id: str) -> Dict[str, Any]:
        if meeting_id not in self.meetings:
            raise NotFoundError(f"Meeting not found: {meeting_id}")
        attendee_id = str(uuid.uuid4())
        attendee = {
            "ExternalUserId": external_user_id,
            "AttendeeId": attendee_id,
            "JoinToken": uuid.uuid4().hex,
        }
        self.attendees[meeting_id][attendee_id] = attendee
        return {"Attendee": attendee}

    async def delete_meeting(self, meeting_id: str) -> None:
        if meeting_id not in self.meetings:
            raise NotFoundError(f"Meeting not found: {meeting_id}")
        del self.meetings[meeting_id]
        del self.attendees[meeting_id]
        logger.info("Local meeting %s deleted", meeting_id)
