"""Admin course preview view-model."""

import logging
from typing import Literal

import sentry_sdk

from core.api_client import AdminApiClient, ApiError, CancellationToken
from core.notices import Notice, error_notice

from . import expansion
from .audit import AuditReport, audit, has_issues, issue_count
from .types import Course, parse_course_preview

logger = logging.getLogger(__name__)

LoadState = Literal["loading", "loaded", "failed"]


class CoursePreviewView:
    """
    One course preview screen.

    `state` is "loading" until the first fetch finishes, then "loaded" or
    "failed". Retry is another call to `load`. The audit is recomputed on
    every access rather than cached.
    """

    def __init__(self, api: AdminApiClient):
        self.api = api
        self.state: LoadState = "loading"
        self.course: Course | None = None
        self.notice: Notice | None = None
        self.expanded: frozenset = expansion.collapse_all()

    async def load(self, course_id: int, token: CancellationToken | None = None) -> LoadState:
        previous = self.state
        self.state = "loading"
        try:
            payload = await self.api.get_course_preview(course_id)
            preview = parse_course_preview(payload)
        except ApiError as e:
            return self._fail(error_notice(e.message), token, previous)
        except ValueError as e:
            logger.warning(f"Course {course_id} preview unusable: {e}")
            return self._fail(error_notice("Course not found"), token, previous)
        except Exception as e:
            logger.error(f"Unexpected error loading course {course_id} preview: {e}")
            sentry_sdk.capture_exception(e)
            return self._fail(error_notice(None), token, previous)

        if token is not None and token.cancelled:
            self.state = previous
            return self.state
        self.course = preview.course
        self.notice = None
        self.expanded = expansion.collapse_all()
        self.state = "loaded"
        return self.state

    def _fail(
        self, notice: Notice, token: CancellationToken | None, previous: LoadState
    ) -> LoadState:
        if token is not None and token.cancelled:
            self.state = previous
            return self.state
        self.course = None
        self.notice = notice
        self.state = "failed"
        return self.state

    def toggle(self, node_id: expansion.NodeId) -> None:
        self.expanded = expansion.toggle(node_id, self.expanded)

    def expand_all(self) -> None:
        if self.course is not None:
            self.expanded = expansion.expand_all(self.course)

    def collapse_all(self) -> None:
        self.expanded = expansion.collapse_all()

    def is_expanded(self, node_id: expansion.NodeId) -> bool:
        return node_id in self.expanded

    @property
    def report(self) -> AuditReport | None:
        if self.course is None:
            return None
        return audit(self.course)

    @property
    def has_issues(self) -> bool:
        if self.course is None:
            return False
        return has_issues(self.course, self.report)

    @property
    def issue_count(self) -> int:
        if self.course is None:
            return 0
        return issue_count(self.course, self.report)
