"""Course content tree: parsing, expand/collapse state and content audit."""

from .types import (
    Course,
    Module,
    Section,
    ContentItem,
    CoursePreview,
    CourseNotFoundError,
    VideoPayload,
    TextPayload,
    ExercisePayload,
    PdfPayload,
    WorkoutPayload,
    WorkoutExercise,
    parse_course_preview,
    course_to_dict,
    module_to_dict,
)
from .expansion import NodeId, module_node, section_node, toggle, expand_all, collapse_all
from .audit import AuditReport, EmptySection, audit, has_issues, issue_count
from .preview import CoursePreviewView

__all__ = [
    "Course",
    "Module",
    "Section",
    "ContentItem",
    "CoursePreview",
    "CourseNotFoundError",
    "VideoPayload",
    "TextPayload",
    "ExercisePayload",
    "PdfPayload",
    "WorkoutPayload",
    "WorkoutExercise",
    "parse_course_preview",
    "course_to_dict",
    "module_to_dict",
    "NodeId",
    "module_node",
    "section_node",
    "toggle",
    "expand_all",
    "collapse_all",
    "AuditReport",
    "EmptySection",
    "audit",
    "has_issues",
    "issue_count",
    "CoursePreviewView",
]
