from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, Union


class Credentials(BaseModel):
    """Login credentials for the authentication endpoint"""
    username: str
    password: str


class StoryPayload(BaseModel):
    """Story spoiler submission sent to create/edit endpoints"""
    title: str
    description: str
    url: str = ""

    def to_json(self) -> dict:
        return self.model_dump()


class Story(BaseModel):
    """Story spoiler as returned by GET /api/Story/All"""
    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None


class StoryCreated(BaseModel):
    """Envelope of a successful creation: carries the new story id"""
    msg: str = ""
    story_id: str = Field(min_length=1)


class ApiMessage(BaseModel):
    """Envelope carrying only a message (edit, delete, errors)"""
    msg: str = ""


StoryResult = Union[StoryCreated, ApiMessage]


class ApiEnvelope(BaseModel):
    """Generic {msg, storyId?} body returned by all story endpoints"""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    msg: Optional[str] = None
    story_id: Optional[str] = Field(default=None, alias="storyId")

    def to_result(self) -> StoryResult:
        """Tag the envelope: an id is only present on successful creation."""
        if self.story_id:
            return StoryCreated(msg=self.msg or "", story_id=self.story_id)
        return ApiMessage(msg=self.msg or "")
