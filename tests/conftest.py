import asyncio
from typing import Any, Dict, List

import pytest
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient

from conferencing.local_client import LocalConferencingClient
from config import Settings
from server.app import create_app
from sessions.store import InMemorySessionStore


class RecordingClient(LocalConferencingClient):
    """Local client that records calls and can pause inside create_meeting."""

    def __init__(self, create_delay: float = 0.0):
        super().__init__()
        self.create_delay = create_delay
        self.calls: List[Dict[str, Any]] = []

    def count(self, operation: str) -> int:
        return sum(1 for call in self.calls if call["operation"] == operation)

    async def create_meeting(self, client_request_token, media_region, external_meeting_id):
        self.calls.append(
            {
                "operation": "CreateMeeting",
                "ClientRequestToken": client_request_token,
                "MediaRegion": media_region,
                "ExternalMeetingId": external_meeting_id,
            }
        )
        if self.create_delay:
            await asyncio.sleep(self.create_delay)
        return await super().create_meeting(client_request_token, media_region, external_meeting_id)

    async def create_attendee(self, meeting_id, external_user_id):
        self.calls.append(
            {"operation": "CreateAttendee", "MeetingId": meeting_id, "ExternalUserId": external_user_id}
        )
        return await super().create_attendee(meeting_id, external_user_id)

    async def delete_meeting(self, meeting_id):
        self.calls.append({"operation": "DeleteMeeting", "MeetingId": meeting_id})
        await super().delete_meeting(meeting_id)


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    dist = tmp_path / "dist"
    dist.mkdir()
    (dist / "meetingV2.html").write_text("<html><body>meeting</body></html>", encoding="utf-8")
    return Settings(
        app_variant="meetingV2",
        dist_dir=str(dist),
        log_dir=str(tmp_path / "logs"),
        debug=False,
    )


@pytest.fixture
def conferencing_client() -> RecordingClient:
    return RecordingClient()


@pytest.fixture
def store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def client(test_settings, conferencing_client, store) -> TestClient:
    app = create_app(settings=test_settings, client=conferencing_client, store=store)
    return TestClient(app)


class FakeBotoClient:
    """Stands in for boto3's chime client; errors maps an operation name to the exception it raises."""

    def __init__(self, error=None, errors=None):
        self.errors = dict(errors or {})
        self.error = error
        self.requests = []
        self._meetings = 0

    def _respond(self, operation, params, body):
        self.requests.append((operation, params))
        error = self.errors.get(operation, self.error)
        if error is not None:
            raise error
        return {**body, "ResponseMetadata": {"HTTPStatusCode": 200}}

    def create_meeting(self, **params):
        self._meetings += 1
        return self._respond("CreateMeeting", params, {"Meeting": {"MeetingId": f"m-{self._meetings}"}})

    def create_attendee(self, **params):
        return self._respond("CreateAttendee", params, {"Attendee": {"AttendeeId": "a-1", "JoinToken": "tok"}})

    def delete_meeting(self, **params):
        return self._respond("DeleteMeeting", params, {})


def client_error(code: str, message: str, operation: str = "CreateMeeting") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)
