"""Content audit for a course: what is filled in and what is still empty."""

from dataclasses import dataclass, field

from .types import Course


@dataclass(frozen=True)
class EmptySection:
    module: str
    section: str


@dataclass
class AuditReport:
    total_modules: int = 0
    total_sections: int = 0
    total_items: int = 0
    modules_with_content: int = 0
    empty_modules: list[str] = field(default_factory=list)
    empty_sections: list[EmptySection] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "totalModules": self.total_modules,
            "totalSections": self.total_sections,
            "totalItems": self.total_items,
            "modulesWithContent": self.modules_with_content,
            "emptyModules": list(self.empty_modules),
            "emptySections": [
                {"module": e.module, "section": e.section} for e in self.empty_sections
            ],
        }


def audit(course: Course) -> AuditReport:
    """
    Count the tree and list its gaps in one pass.

    A module has content when at least one of its sections has an item; its
    own fields do not count. A module whose sections are all empty is listed
    in `empty_modules` and each of those sections in `empty_sections`.
    """
    report = AuditReport()
    for module in course.modules:
        report.total_modules += 1
        module_has_content = False
        for section in module.sections:
            report.total_sections += 1
            report.total_items += len(section.items)
            if section.items:
                module_has_content = True
            else:
                report.empty_sections.append(EmptySection(module.name, section.title))
        if module_has_content:
            report.modules_with_content += 1
        else:
            report.empty_modules.append(module.name)
    return report


def has_issues(course: Course, report: AuditReport | None = None) -> bool:
    """Empty modules, empty sections, or no cover image."""
    return issue_count(course, report) > 0


def issue_count(course: Course, report: AuditReport | None = None) -> int:
    if report is None:
        report = audit(course)
    missing_image = 0 if course.image_url else 1
    return len(report.empty_modules) + len(report.empty_sections) + missing_image
