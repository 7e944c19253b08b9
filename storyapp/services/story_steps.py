"""
Story API Test Steps

Ordered checks against the Story Spoiler endpoints. Steps 1-4 form a chain
(create -> edit -> list -> delete) sharing the id returned by step 1;
the remaining steps are independent negative cases.
"""
from dataclasses import dataclass
from typing import Callable, List, Optional

from storyapp.config import DEFAULT_NON_EXISTING_ID
from storyapp.models import ApiEnvelope, Story, StoryCreated, StoryPayload
from storyapp.services.errors import StepAssertionError
from storyapp.services.logging_service import log_step
from storyapp.services.story_client import ApiResponse, StoryApiClient

MSG_CREATED = "Successfully created!"
MSG_EDITED = "Successfully edited"
MSG_DELETED = "Deleted successfully!"
MSG_NOT_FOUND = "No spoilers..."
MSG_DELETE_FAILED = "Unable to delete this story spoiler!"


@dataclass
class StoryContext:
    """Carries the id of the story created by the first step."""
    story_id: Optional[str] = None

    def require_story_id(self) -> str:
        if not self.story_id:
            raise StepAssertionError(
                "No story id recorded: the create step did not succeed"
            )
        return self.story_id


def _expect_status(response: ApiResponse, expected: int) -> None:
    if response.status_code != expected:
        raise StepAssertionError(
            f"Expected status {expected}, got {response.status_code}: {response.body[:200]}"
        )


def _expect_message(envelope: ApiEnvelope, expected: str) -> None:
    if envelope.msg != expected:
        raise StepAssertionError(f"Expected message {expected!r}, got {envelope.msg!r}")


def first_story_payload() -> StoryPayload:
    return StoryPayload(
        title="My First Story Spoiler",
        description="This is my first story spoiler so far.",
        url=""
    )


def edited_story_payload() -> StoryPayload:
    return StoryPayload(
        title="My first edited story",
        description="This is the updated version of my first story.",
        url=""
    )


@log_step("create_story")
def create_story_step(client: StoryApiClient) -> str:
    """POST /api/Story/Create -> 201 "Successfully created!"; returns the new id."""
    response = client.create_story(first_story_payload())
    _expect_status(response, 201)
    envelope = response.envelope()
    _expect_message(envelope, MSG_CREATED)

    result = envelope.to_result()
    if not isinstance(result, StoryCreated):
        raise StepAssertionError(f"Creation response carries no storyId: {response.body[:200]}")
    return result.story_id


@log_step("edit_story")
def edit_story_step(client: StoryApiClient, story_id: str) -> None:
    """PUT /api/Story/Edit/{id} -> 200 "Successfully edited"."""
    response = client.edit_story(story_id, edited_story_payload())
    _expect_status(response, 200)
    envelope = response.envelope()
    _expect_message(envelope, MSG_EDITED)


@log_step("list_stories")
def list_stories_step(client: StoryApiClient) -> List[Story]:
    """GET /api/Story/All -> 200 with a non-empty list."""
    response = client.list_stories()
    _expect_status(response, 200)
    stories = response.stories()
    if not stories:
        raise StepAssertionError("Expected a non-empty story list")
    return stories


@log_step("delete_story")
def delete_story_step(client: StoryApiClient, story_id: str) -> None:
    """DELETE /api/Story/Delete/{id} -> 200 "Deleted successfully!"."""
    response = client.delete_story(story_id)
    _expect_status(response, 200)
    envelope = response.envelope()
    _expect_message(envelope, MSG_DELETED)


@log_step("delete_story_again")
def delete_story_again_step(client: StoryApiClient, story_id: str) -> None:
    """A story that was deleted cannot be deleted a second time."""
    response = client.delete_story(story_id)
    _expect_status(response, 400)
    envelope = response.envelope()
    _expect_message(envelope, MSG_DELETE_FAILED)


@log_step("create_story_without_required_fields")
def create_story_without_required_fields_step(client: StoryApiClient) -> None:
    """Empty title and description -> 400 (message not checked)."""
    response = client.create_story(StoryPayload(title="", description=""))
    _expect_status(response, 400)


@log_step("edit_non_existing_story")
def edit_non_existing_story_step(
    client: StoryApiClient,
    story_id: str = DEFAULT_NON_EXISTING_ID
) -> None:
    """PUT on an unknown id -> 404 "No spoilers..."."""
    response = client.edit_story(story_id, edited_story_payload())
    _expect_status(response, 404)
    envelope = response.envelope()
    _expect_message(envelope, MSG_NOT_FOUND)


@log_step("delete_non_existing_story")
def delete_non_existing_story_step(
    client: StoryApiClient,
    story_id: str = DEFAULT_NON_EXISTING_ID
) -> None:
    """DELETE on an unknown id -> 400 "Unable to delete this story spoiler!"."""
    response = client.delete_story(story_id)
    _expect_status(response, 400)
    envelope = response.envelope()
    _expect_message(envelope, MSG_DELETE_FAILED)


@dataclass
class StoryStep:
    """A named step bound to the shared context, for sequential runners"""
    name: str
    run: Callable[[StoryApiClient, StoryContext, str], object]


def _run_create(client: StoryApiClient, context: StoryContext, missing_id: str) -> dict:
    context.story_id = create_story_step(client)
    return {"story_id": context.story_id}


def _run_edit(client: StoryApiClient, context: StoryContext, missing_id: str) -> None:
    edit_story_step(client, context.require_story_id())


def _run_list(client: StoryApiClient, context: StoryContext, missing_id: str) -> dict:
    return {"story_count": len(list_stories_step(client))}


def _run_delete(client: StoryApiClient, context: StoryContext, missing_id: str) -> None:
    delete_story_step(client, context.require_story_id())


def _run_delete_again(client: StoryApiClient, context: StoryContext, missing_id: str) -> None:
    delete_story_again_step(client, context.require_story_id())


def _run_create_invalid(client: StoryApiClient, context: StoryContext, missing_id: str) -> None:
    create_story_without_required_fields_step(client)


def _run_edit_missing(client: StoryApiClient, context: StoryContext, missing_id: str) -> None:
    edit_non_existing_story_step(client, missing_id)


def _run_delete_missing(client: StoryApiClient, context: StoryContext, missing_id: str) -> None:
    delete_non_existing_story_step(client, missing_id)


STORY_STEPS: List[StoryStep] = [
    StoryStep("Create Story", _run_create),
    StoryStep("Edit Story", _run_edit),
    StoryStep("List Stories", _run_list),
    StoryStep("Delete Story", _run_delete),
    StoryStep("Delete Story Again", _run_delete_again),
    StoryStep("Create Story Without Required Fields", _run_create_invalid),
    StoryStep("Edit Non-Existing Story", _run_edit_missing),
    StoryStep("Delete Non-Existing Story", _run_delete_missing),
]
