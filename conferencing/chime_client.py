import asyncio
from typing import Any, Callable, Dict

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from conferencing.base import ConferencingClient
from errors import NotFoundError, UpstreamError, ValidationError
from utils.logging_utils import get_logger

logger = get_logger(__name__)

_ERROR_CLASSES = {
    "BadRequestException": ValidationError,
    "ValidationException": ValidationError,
    "NotFoundException": NotFoundError,
}


class ChimeClient(ConferencingClient):
    def __init__(self, endpoint_url: str, region_name: str = "us-east-1", client: Any = None):
        self.endpoint_url = endpoint_url
        self.region_name = region_name
        self.client = client if client is not None else boto3.client(
            "chime", region_name=region_name, endpoint_url=endpoint_url
        )

    async def _call(self, operation: str, func: Callable[..., Dict[str, Any]], **params) -> Dict[str, Any]:
        logger.info("Calling Chime %s", operation)
        try:
            response = await asyncio.to_thread(func, **params)
        except ClientError as exc:
            error = exc.response.get("Error", {})
            code = error.get("Code", "")
            message = error.get("Message") or str(exc)
            logger.error("Chime %s failed (%s): %s", operation, code, message)
            raise _ERROR_CLASSES.get(code, UpstreamError)(message) from exc
        except BotoCoreError as exc:
            logger.error("Chime %s failed: %s", operation, exc)
            raise UpstreamError(str(exc)) from exc
        response.pop("ResponseMetadata", None)
        return response

    async def create_meeting(
        self, client_request_token: str, media_region: str, external_meeting_id: str
    ) -> Dict[str, Any]:
        return await self._call(
            "CreateMeeting",
            self.client.create_meeting,
            ClientRequestToken=client_request_token,
            MediaRegion=media_region,
            ExternalMeetingId=external_meeting_id,
        )

    async def create_attendee(self, meeting_id: str, external_user_id: str) -> Dict[str, Any]:
        return await self._call(
            "CreateAttendee",
            self.client.create_attendee,
            MeetingId=meeting_id,
            ExternalUserId=external_user_id,
        )

    async def delete_meeting(self, meeting_id: str) -> None:
        await self._call("DeleteMeeting", self.client.delete_meeting, MeetingId=meeting_id)
