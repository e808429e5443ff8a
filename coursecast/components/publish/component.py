"""Publish component - the idempotent publish transition for one assignment."""

import logging
from uuid import UUID

from coursecast.components.publish.models import PublishInput, PublishResult
from coursecast.components.publish.ports import AssignmentWriterPort, ClockPort

logger = logging.getLogger(__name__)


class PublishComponent:
    """
    Publishes an assignment at most once.

    The transition is a single conditional write, never read-then-write,
    so any number of concurrent callers yield exactly one published=True.
    Datastore errors propagate to the caller.
    """

    def __init__(self, repo: AssignmentWriterPort, clock: ClockPort) -> None:
        self._repo = repo
        self._clock = clock

    def publish(self, assignment_id: UUID, actor_id: UUID) -> PublishResult:
        now = self._clock.now_utc()
        if self._repo.publish_if_unpublished(assignment_id, actor_id, now):
            logger.info("Published assignment %s", assignment_id)
            return PublishResult(published=True, published_at=now)
        return PublishResult(published=False)

    def run(self, input_data: PublishInput) -> PublishResult:
        """Main dispatcher."""
        if isinstance(input_data, PublishInput):
            return self.publish(input_data.assignment_id, input_data.actor_id)
        raise TypeError(f"Unknown input type: {type(input_data)}")


def run(
    inp: PublishInput,
    *,
    repo: AssignmentWriterPort,
    clock: ClockPort,
) -> PublishResult:
    """Component entry point."""
    return PublishComponent(repo, clock).run(inp)
