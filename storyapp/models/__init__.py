from .story import (
    Credentials, StoryPayload, Story,
    ApiEnvelope, ApiMessage, StoryCreated, StoryResult
)
