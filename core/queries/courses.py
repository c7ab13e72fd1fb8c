"""Course, module, section and content-item queries using SQLAlchemy Core."""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncConnection

from ..courses.types import (
    ContentItem,
    Course,
    ExercisePayload,
    Module,
    PdfPayload,
    Section,
    TextPayload,
    VideoPayload,
    WorkoutExercise,
    WorkoutPayload,
    parse_content_kind,
)
from ..enums import ContentKind, CourseStatus, ModuleType
from ..tables import (
    content_items,
    course_module_mappings,
    course_modules,
    courses,
    exercises,
    module_sections,
    structured_workouts,
    workout_exercise_links,
)


# --- Courses ---


async def list_courses(conn: AsyncConnection) -> list[dict[str, Any]]:
    result = await conn.execute(
        select(courses).order_by(courses.c.created_at.desc(), courses.c.course_id.desc())
    )
    return [dict(row) for row in result.mappings()]


async def get_course(conn: AsyncConnection, course_id: int) -> dict[str, Any] | None:
    result = await conn.execute(select(courses).where(courses.c.course_id == course_id))
    row = result.mappings().first()
    return dict(row) if row else None


async def create_course(
    conn: AsyncConnection,
    name: str,
    slug: str,
    description: str = "",
    status: CourseStatus = CourseStatus.draft,
    image_url: str | None = None,
) -> dict[str, Any]:
    result = await conn.execute(
        insert(courses)
        .values(
            name=name,
            slug=slug,
            description=description,
            status=status,
            image_url=image_url,
        )
        .returning(courses)
    )
    return dict(result.mappings().first())


async def update_course(
    conn: AsyncConnection,
    course_id: int,
    **updates: Any,
) -> dict[str, Any] | None:
    """Update a course and return the updated record (None if it doesn't exist)."""
    updates["updated_at"] = datetime.now(timezone.utc)
    result = await conn.execute(
        update(courses)
        .where(courses.c.course_id == course_id)
        .values(**updates)
        .returning(courses)
    )
    row = result.mappings().first()
    return dict(row) if row else None


async def delete_course(conn: AsyncConnection, course_id: int) -> bool:
    """Delete a course. Its module mappings go with it; modules are kept."""
    result = await conn.execute(delete(courses).where(courses.c.course_id == course_id))
    return result.rowcount > 0


# --- Modules, sections, items ---


async def create_module(
    conn: AsyncConnection,
    name: str,
    module_type: ModuleType,
    description: str | None = None,
    color_theme: str | None = None,
) -> dict[str, Any]:
    result = await conn.execute(
        insert(course_modules)
        .values(
            name=name,
            module_type=module_type,
            description=description,
            color_theme=color_theme,
        )
        .returning(course_modules)
    )
    return dict(result.mappings().first())


async def attach_module(
    conn: AsyncConnection,
    course_id: int,
    module_id: int,
    order_index: int = 0,
    is_required: bool = True,
) -> dict[str, Any]:
    """Add a module to a course at the given position."""
    result = await conn.execute(
        insert(course_module_mappings)
        .values(
            course_id=course_id,
            module_id=module_id,
            order_index=order_index,
            is_required=is_required,
        )
        .returning(course_module_mappings)
    )
    return dict(result.mappings().first())


async def create_section(
    conn: AsyncConnection,
    module_id: int,
    title: str,
    description: str | None = None,
    order_index: int = 0,
) -> dict[str, Any]:
    result = await conn.execute(
        insert(module_sections)
        .values(
            module_id=module_id,
            title=title,
            description=description,
            order_index=order_index,
        )
        .returning(module_sections)
    )
    return dict(result.mappings().first())


async def create_content_item(
    conn: AsyncConnection,
    section_id: int,
    title: str,
    content_type: ContentKind,
    order_index: int = 0,
    **fields: Any,
) -> dict[str, Any]:
    """Add an item to a section. `fields` are content_items columns (video_url, content, ...)."""
    result = await conn.execute(
        insert(content_items)
        .values(
            section_id=section_id,
            title=title,
            content_type=ContentKind(content_type).value,
            order_index=order_index,
            **fields,
        )
        .returning(content_items)
    )
    return dict(result.mappings().first())


# --- Tree ---


async def _get_workout(conn: AsyncConnection, workout_id: int) -> WorkoutPayload | None:
    result = await conn.execute(
        select(structured_workouts).where(structured_workouts.c.workout_id == workout_id)
    )
    workout = result.mappings().first()
    if not workout:
        return None

    links = await conn.execute(
        select(
            workout_exercise_links,
            exercises.c.name.label("exercise_name"),
            exercises.c.video_url.label("exercise_video_url"),
        )
        .join(exercises, exercises.c.exercise_id == workout_exercise_links.c.exercise_id)
        .where(workout_exercise_links.c.workout_id == workout_id)
        .order_by(workout_exercise_links.c.order_index, workout_exercise_links.c.link_id)
    )
    return WorkoutPayload(
        name=workout["name"],
        rounds=workout["rounds"],
        exercises=[
            WorkoutExercise(
                id=link["link_id"],
                name=link["exercise_name"],
                video_url=link["exercise_video_url"],
                reps=link["reps"],
                sets=link["sets"],
                duration=link["duration"],
                rest_after=link["rest_after"],
                side_specific=bool(link["side_specific"]),
                order_index=link["order_index"],
            )
            for link in links.mappings()
        ],
    )


async def _build_item(conn: AsyncConnection, row: dict) -> ContentItem:
    kind = parse_content_kind(row["content_type"])
    payload = None
    if kind == ContentKind.video:
        payload = VideoPayload(url=row["video_url"], duration=row["duration"])
    elif kind == ContentKind.text:
        payload = TextPayload(body=row["content"] or "")
    elif kind == ContentKind.pdf:
        payload = PdfPayload(url=row["content"])
    elif kind == ContentKind.exercise:
        payload = ExercisePayload(
            name=row["exercise_name"],
            video_url=row["exercise_video_url"],
            reps=row["reps_override"],
        )
    elif kind == ContentKind.workout and row["structured_workout_id"]:
        payload = await _get_workout(conn, row["structured_workout_id"])
    return ContentItem(id=row["item_id"], title=row["title"], kind=kind, payload=payload)


async def get_course_tree(conn: AsyncConnection, course_id: int) -> Course | None:
    """
    Load a course with its modules, sections and items, each level ordered
    by order_index, then insertion order. Exercise items carry the exercise's name and video;
    workout items carry the workout and its exercises.

    Returns None if the course doesn't exist.
    """
    course_row = await get_course(conn, course_id)
    if not course_row:
        return None

    module_rows = await conn.execute(
        select(
            course_modules,
            course_module_mappings.c.order_index,
            course_module_mappings.c.is_required,
        )
        .join(
            course_module_mappings,
            course_module_mappings.c.module_id == course_modules.c.module_id,
        )
        .where(course_module_mappings.c.course_id == course_id)
        .order_by(course_module_mappings.c.order_index, course_module_mappings.c.mapping_id)
    )

    modules = []
    for m in module_rows.mappings().all():
        section_rows = await conn.execute(
            select(module_sections)
            .where(module_sections.c.module_id == m["module_id"])
            .order_by(module_sections.c.order_index, module_sections.c.section_id)
        )
        sections = []
        for s in section_rows.mappings().all():
            item_rows = await conn.execute(
                select(
                    content_items,
                    exercises.c.name.label("exercise_name"),
                    exercises.c.video_url.label("exercise_video_url"),
                )
                .outerjoin(exercises, exercises.c.exercise_id == content_items.c.exercise_id)
                .where(content_items.c.section_id == s["section_id"])
                .order_by(content_items.c.order_index, content_items.c.item_id)
            )
            items = [await _build_item(conn, dict(i)) for i in item_rows.mappings().all()]
            sections.append(
                Section(
                    id=s["section_id"],
                    title=s["title"],
                    description=s["description"],
                    items=items,
                )
            )
        modules.append(
            Module(
                id=m["module_id"],
                name=m["name"],
                module_type=ModuleType(m["module_type"]),
                description=m["description"],
                is_required=m["is_required"] is not False,
                sections=sections,
            )
        )

    return Course(
        id=course_row["course_id"],
        name=course_row["name"],
        slug=course_row["slug"],
        description=course_row["description"],
        status=CourseStatus(course_row["status"] or CourseStatus.draft),
        image_url=course_row["image_url"],
        modules=modules,
    )
