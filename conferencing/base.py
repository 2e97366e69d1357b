from abc import ABC, abstractmethod
from typing import Any, Dict


class ConferencingClient(ABC):
    @abstractmethod
    async def create_meeting(
        self, client_request_token: str, media_region: str, external_meeting_id: str
    ) -> Dict[str, Any]:
        """Create a meeting and return the CreateMeeting response ({"Meeting": {...}})."""
        raise NotImplementedError

    @abstractmethod
    async def create_attendee(self, meeting_id: str, external_user_id: str) -> Dict[str, Any]:
        """Add an attendee and return the CreateAttendee response ({"Attendee": {...}})."""
        raise NotImplementedError

    @abstractmethod
    async def delete_meeting(self, meeting_id: str) -> None:
        """End the meeting. All attendee connections hang up."""
        raise NotImplementedError
