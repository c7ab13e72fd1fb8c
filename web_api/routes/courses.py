"""Course content management API routes.

All endpoints require admin authentication.

Endpoints:
- GET /api/admin/courses - List courses
- POST /api/admin/courses - Create a course
- PATCH /api/admin/courses/{course_id} - Update a course
- DELETE /api/admin/courses/{course_id} - Delete a course
- GET /api/admin/courses/{course_id}/preview - Course tree with content audit
- POST /api/admin/courses/{course_id}/modules - Attach a module to a course
- POST /api/admin/modules - Create a module
- POST /api/admin/modules/{module_id}/sections - Add a section to a module
- POST /api/admin/sections/{section_id}/items - Add a content item to a section
"""

import sys
from pathlib import Path
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from core.courses import audit, course_to_dict, module_to_dict
from core.database import get_connection, get_transaction
from core.enums import ContentKind, CourseStatus, ModuleType
from core.queries.courses import (
    attach_module,
    create_content_item,
    create_course,
    create_module,
    create_section,
    delete_course,
    get_course_tree,
    list_courses,
    update_course,
)
from web_api.auth import require_admin

router = APIRouter(prefix="/api/admin", tags=["courses"])


class CreateCourseRequest(BaseModel):
    name: str
    slug: str
    description: str = ""
    status: CourseStatus = CourseStatus.draft
    image_url: str | None = None


class UpdateCourseRequest(BaseModel):
    name: str | None = None
    slug: str | None = None
    description: str | None = None
    status: CourseStatus | None = None
    image_url: str | None = None


class CreateModuleRequest(BaseModel):
    name: str
    module_type: ModuleType
    description: str | None = None
    color_theme: str | None = None


class AttachModuleRequest(BaseModel):
    module_id: int
    order_index: int = 0
    is_required: bool = True


class CreateSectionRequest(BaseModel):
    title: str
    description: str | None = None
    order_index: int = 0


class CreateContentItemRequest(BaseModel):
    title: str
    content_type: ContentKind
    order_index: int = 0
    content: str | None = None
    video_url: str | None = None
    duration: str | None = None
    exercise_id: int | None = None
    reps_override: str | None = None
    structured_workout_id: int | None = None


@router.get("/courses")
async def list_courses_endpoint(
    admin: dict = Depends(require_admin),
) -> dict[str, Any]:
    async with get_connection() as conn:
        courses = await list_courses(conn)

    return {"courses": courses}


@router.post("/courses", status_code=201)
async def create_course_endpoint(
    request: CreateCourseRequest,
    admin: dict = Depends(require_admin),
) -> dict[str, Any]:
    try:
        async with get_transaction() as conn:
            course = await create_course(conn, **request.model_dump())
    except IntegrityError:
        raise HTTPException(status_code=409, detail="A course with this slug already exists")

    return course


@router.patch("/courses/{course_id}")
async def update_course_endpoint(
    course_id: int,
    request: UpdateCourseRequest,
    admin: dict = Depends(require_admin),
) -> dict[str, Any]:
    updates = request.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=400, detail="Nothing to update")

    async with get_transaction() as conn:
        course = await update_course(conn, course_id, **updates)

    if not course:
        raise HTTPException(status_code=404, detail="Course not found")
    return course


@router.delete("/courses/{course_id}")
async def delete_course_endpoint(
    course_id: int,
    admin: dict = Depends(require_admin),
) -> dict[str, Any]:
    async with get_transaction() as conn:
        deleted = await delete_course(conn, course_id)

    if not deleted:
        raise HTTPException(status_code=404, detail="Course not found")
    return {"status": "deleted"}


@router.get("/courses/{course_id}/preview")
async def preview_course(
    course_id: int,
    admin: dict = Depends(require_admin),
) -> dict[str, Any]:
    """The course as members see it, plus counts and empty modules/sections."""
    async with get_connection() as conn:
        course = await get_course_tree(conn, course_id)

    if course is None:
        raise HTTPException(status_code=404, detail="Course not found")

    return {
        "course": course_to_dict(course),
        "modules": [module_to_dict(m) for m in course.modules],
        "stats": audit(course).to_dict(),
    }


@router.post("/courses/{course_id}/modules", status_code=201)
async def attach_module_endpoint(
    course_id: int,
    request: AttachModuleRequest,
    admin: dict = Depends(require_admin),
) -> dict[str, Any]:
    try:
        async with get_transaction() as conn:
            mapping = await attach_module(conn, course_id, **request.model_dump())
    except IntegrityError:
        raise HTTPException(
            status_code=409, detail="Module is already in this course, or does not exist"
        )

    return mapping


@router.post("/modules", status_code=201)
async def create_module_endpoint(
    request: CreateModuleRequest,
    admin: dict = Depends(require_admin),
) -> dict[str, Any]:
    async with get_transaction() as conn:
        module = await create_module(conn, **request.model_dump())

    return module


@router.post("/modules/{module_id}/sections", status_code=201)
async def create_section_endpoint(
    module_id: int,
    request: CreateSectionRequest,
    admin: dict = Depends(require_admin),
) -> dict[str, Any]:
    try:
        async with get_transaction() as conn:
            section = await create_section(conn, module_id, **request.model_dump())
    except IntegrityError:
        raise HTTPException(status_code=404, detail="Module not found")

    return section


@router.post("/sections/{section_id}/items", status_code=201)
async def create_content_item_endpoint(
    section_id: int,
    request: CreateContentItemRequest,
    admin: dict = Depends(require_admin),
) -> dict[str, Any]:
    fields = request.model_dump(exclude_none=True)
    try:
        async with get_transaction() as conn:
            item = await create_content_item(conn, section_id, **fields)
    except IntegrityError:
        raise HTTPException(status_code=404, detail="Section not found")

    return item
