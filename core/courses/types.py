"""
Course content tree: Course -> Module -> Section -> ContentItem.

Children are kept in the order they were delivered; the server orders by
order_index and nothing here re-sorts. Emptiness is computed from the
tree, never stored.

Wire shape (GET /api/admin/courses/{id}/preview) uses the DB column names
for rows and `sections` / `contentItems` for children.
"""

from dataclasses import dataclass, field
from typing import Any, Union

from core.enums import ContentKind, CourseStatus, ModuleType


class CourseNotFoundError(Exception):
    """Raised when a course id does not exist."""

    pass


@dataclass
class VideoPayload:
    url: str | None = None
    duration: str | None = None


@dataclass
class TextPayload:
    body: str = ""


@dataclass
class ExercisePayload:
    name: str | None = None
    video_url: str | None = None
    reps: str | None = None


@dataclass
class PdfPayload:
    url: str | None = None


@dataclass
class WorkoutExercise:
    id: int
    name: str
    video_url: str | None = None
    reps: str | None = None
    sets: int | None = None
    duration: str | None = None
    rest_after: int | None = None
    side_specific: bool = False
    order_index: int = 0


@dataclass
class WorkoutPayload:
    name: str | None = None
    rounds: int | None = None
    exercises: list[WorkoutExercise] = field(default_factory=list)


Payload = Union[VideoPayload, TextPayload, ExercisePayload, PdfPayload, WorkoutPayload]


@dataclass
class ContentItem:
    id: int
    title: str
    kind: ContentKind
    payload: Payload | None = None


@dataclass
class Section:
    id: int
    title: str
    description: str | None = None
    items: list[ContentItem] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.items


@dataclass
class Module:
    id: int
    name: str
    module_type: ModuleType = ModuleType.educational
    description: str | None = None
    is_required: bool = True
    sections: list[Section] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when no section has any item (a module of empty sections is empty)."""
        return all(s.is_empty for s in self.sections)


@dataclass
class Course:
    id: int
    name: str
    slug: str | None = None
    description: str | None = None
    status: CourseStatus = CourseStatus.draft
    image_url: str | None = None
    modules: list[Module] = field(default_factory=list)


@dataclass
class CoursePreview:
    course: Course
    # Server-computed stats, as delivered; recompute with audit() for display
    stats: dict[str, Any] | None = None


# --- Wire -> tree ---


def parse_content_kind(value: str | None) -> ContentKind:
    try:
        return ContentKind(value)
    except ValueError:
        return ContentKind.other


def _parse_payload(kind: ContentKind, row: dict) -> Payload | None:
    if kind == ContentKind.video:
        return VideoPayload(url=row.get("video_url"), duration=row.get("duration"))
    if kind == ContentKind.text:
        return TextPayload(body=row.get("content") or "")
    if kind == ContentKind.exercise:
        return ExercisePayload(
            name=row.get("exercise_name"),
            video_url=row.get("exercise_video_url"),
            reps=row.get("reps_override"),
        )
    if kind == ContentKind.pdf:
        return PdfPayload(url=row.get("content"))
    if kind == ContentKind.workout:
        return WorkoutPayload(
            name=row.get("workout_name"),
            rounds=row.get("workout_rounds"),
            exercises=[
                WorkoutExercise(
                    id=e["id"],
                    name=e.get("exercise_name") or "",
                    video_url=e.get("exercise_video_url"),
                    reps=e.get("reps"),
                    sets=e.get("sets"),
                    duration=e.get("duration"),
                    rest_after=e.get("rest_after"),
                    side_specific=bool(e.get("side_specific")),
                    order_index=e.get("order_index") or 0,
                )
                for e in row.get("workout_exercises") or []
            ],
        )
    return None


def parse_content_item(row: dict) -> ContentItem:
    kind = parse_content_kind(row.get("content_type"))
    return ContentItem(
        id=row["id"],
        title=row.get("title") or "",
        kind=kind,
        payload=_parse_payload(kind, row),
    )


def parse_section(row: dict) -> Section:
    return Section(
        id=row["id"],
        title=row.get("title") or "",
        description=row.get("description"),
        items=[parse_content_item(i) for i in row.get("contentItems") or []],
    )


def parse_module(row: dict) -> Module:
    return Module(
        id=row["id"],
        name=row.get("name") or "",
        module_type=ModuleType(row.get("module_type") or ModuleType.educational),
        description=row.get("description"),
        is_required=row.get("is_required", True),
        sections=[parse_section(s) for s in row.get("sections") or []],
    )


def parse_course_preview(payload: dict) -> CoursePreview:
    """Build the tree from a preview response.

    Raises:
        ValueError: If the payload has no course
    """
    if not payload or not payload.get("course"):
        raise ValueError("Preview payload has no course")
    row = payload["course"]
    course = Course(
        id=row["id"],
        name=row.get("name") or "",
        slug=row.get("slug"),
        description=row.get("description"),
        status=CourseStatus(row.get("status") or CourseStatus.draft),
        image_url=row.get("image_url"),
        modules=[parse_module(m) for m in payload.get("modules") or []],
    )
    return CoursePreview(course=course, stats=payload.get("stats"))


# --- Tree -> wire ---


def _payload_to_dict(item: ContentItem) -> dict:
    p = item.payload
    if isinstance(p, VideoPayload):
        return {"video_url": p.url, "duration": p.duration}
    if isinstance(p, TextPayload):
        return {"content": p.body}
    if isinstance(p, ExercisePayload):
        return {
            "exercise_name": p.name,
            "exercise_video_url": p.video_url,
            "reps_override": p.reps,
        }
    if isinstance(p, PdfPayload):
        return {"content": p.url}
    if isinstance(p, WorkoutPayload):
        return {
            "workout_name": p.name,
            "workout_rounds": p.rounds,
            "workout_exercises": [
                {
                    "id": e.id,
                    "exercise_name": e.name,
                    "exercise_video_url": e.video_url,
                    "reps": e.reps,
                    "sets": e.sets,
                    "duration": e.duration,
                    "rest_after": e.rest_after,
                    "side_specific": e.side_specific,
                    "order_index": e.order_index,
                }
                for e in p.exercises
            ],
        }
    return {}


def module_to_dict(module: Module) -> dict:
    return {
        "id": module.id,
        "name": module.name,
        "description": module.description,
        "module_type": module.module_type.value,
        "is_required": module.is_required,
        "sections": [
            {
                "id": s.id,
                "title": s.title,
                "description": s.description,
                "contentItems": [
                    {
                        "id": i.id,
                        "title": i.title,
                        "content_type": i.kind.value,
                        **_payload_to_dict(i),
                    }
                    for i in s.items
                ],
            }
            for s in module.sections
        ],
    }


def course_to_dict(course: Course) -> dict:
    """Course row fields only; modules are emitted separately (see module_to_dict)."""
    return {
        "id": course.id,
        "name": course.name,
        "slug": course.slug,
        "description": course.description,
        "status": course.status.value,
        "image_url": course.image_url,
    }
