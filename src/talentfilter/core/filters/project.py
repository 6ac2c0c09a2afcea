"""Project predicates resolved against the canonical project collection."""

from __future__ import annotations

from typing import Callable

from ...schemas import Candidate, FilterCriteria, Project
from ..context import EvaluationContext
from ..normalize import key_set, matching_values, normalize_key, parse_team_size
from ..results import Evidence, PredicateResult, evidence
from .common import (
    CategoryFilter,
    in_date_window,
    iter_project_refs,
    resolve_projects,
    threshold,
    title_matches,
)


def project_evidence(project: Project, type_: str, label: str, values: list) -> Evidence:
    return evidence(
        "projects",
        project.project_name,
        type_,
        label,
        values,
        project_id=project.id,
        status=project.status,
        project_type=project.project_type,
    )


class ProjectFilter(CategoryFilter):
    """Project name, status, type, stack, domains, team size and activity window."""

    category = "projects"
    fields = (
        "projects",
        "project_status",
        "project_types",
        "tech_stacks",
        "vertical_domains",
        "horizontal_domains",
        "technical_aspects",
        "project_team_size_min",
        "project_team_size_max",
        "project_start_date",
        "project_end_date",
    )

    _ATTRIBUTES: tuple[tuple[str, str, str, Callable[[Project], list[str | None]]], ...] = (
        ("project_status", "status", "Project Status", lambda project: [project.status]),
        ("project_types", "type", "Project Type", lambda project: [project.project_type]),
        ("tech_stacks", "techStack", "Tech Stack", lambda project: list(project.tech_stacks)),
        (
            "vertical_domains",
            "verticalDomain",
            "Vertical Domain",
            lambda project: list(project.vertical_domains),
        ),
        (
            "horizontal_domains",
            "horizontalDomain",
            "Horizontal Domain",
            lambda project: list(project.horizontal_domains),
        ),
        (
            "technical_aspects",
            "technicalAspect",
            "Technical Aspect",
            lambda project: list(project.technical_aspects),
        ),
    )

    def evaluate(
        self,
        candidate: Candidate,
        criteria: FilterCriteria,
        context: EvaluationContext,
    ) -> list[PredicateResult]:
        results: list[PredicateResult] = []
        projects = resolve_projects(iter_project_refs(candidate), context)

        if criteria.is_set("projects"):
            results.append(self._project_names(candidate, criteria, context))

        for field_name, type_, label, extract in self._ATTRIBUTES:
            if not criteria.is_set(field_name):
                continue
            selected = key_set(getattr(criteria, field_name))
            found = []
            for project in projects:
                values = matching_values(extract(project), selected)
                if values:
                    found.append(project_evidence(project, type_, label, values))
            results.append(PredicateResult.of(field_name, bool(found), found))

        team_size = self._team_size(projects, criteria)
        if team_size is not None:
            results.append(team_size)

        if criteria.project_start_date is not None or criteria.project_end_date is not None:
            found = [
                project_evidence(project, "activity", "Active Period", [self._period(project)])
                for project in projects
                if in_date_window(
                    project.start_date,
                    project.end_date,
                    criteria.project_start_date,
                    criteria.project_end_date,
                )
            ]
            results.append(PredicateResult.of("project_dates", bool(found), found))

        return results

    def _project_names(
        self,
        candidate: Candidate,
        criteria: FilterCriteria,
        context: EvaluationContext,
    ) -> PredicateResult:
        selected = key_set(criteria.projects)
        found: list[Evidence] = []
        seen: set[str] = set()
        for _, reference in iter_project_refs(candidate):
            key = normalize_key(reference.project_name)
            if key not in selected or key in seen:
                continue
            seen.add(key)
            project = context.reference.project(reference.project_name)
            if project is not None:
                found.append(project_evidence(project, "project", "Project Name", [project.project_name]))
            else:
                found.append(
                    evidence(
                        self.category,
                        reference.project_name,
                        "project",
                        "Project Name",
                        [reference.project_name],
                    )
                )
        return PredicateResult.of("projects", bool(found), found)

    def _team_size(self, projects: list[Project], criteria: FilterCriteria) -> PredicateResult | None:
        low = threshold(criteria, "project_team_size_min")
        high = threshold(criteria, "project_team_size_max")
        if low is None and high is None:
            return None
        found = []
        for project in projects:
            size = parse_team_size(project.team_size)
            if size is None:
                continue
            size_min, size_max = size
            if low is not None and size_max < low:
                continue
            if high is not None and size_min > high:
                continue
            found.append(project_evidence(project, "teamSize", "Team Size", [project.team_size]))
        return PredicateResult.of("project_team_size", bool(found), found)

    @staticmethod
    def _period(project: Project) -> str:
        start = project.start_date.isoformat() if project.start_date else "?"
        end = project.end_date.isoformat() if project.end_date else "present"
        return f"{start} to {end}"


class PublishingFilter(CategoryFilter):
    """Published status, platforms and download counts.

    When job titles are also selected, the download check only looks at
    projects reached through experiences holding one of those titles.
    """

    category = "projects"
    fields = ("is_published", "publish_platforms", "min_download_count")

    def evaluate(
        self,
        candidate: Candidate,
        criteria: FilterCriteria,
        context: EvaluationContext,
    ) -> list[PredicateResult]:
        results: list[PredicateResult] = []
        projects = resolve_projects(iter_project_refs(candidate), context)

        if criteria.is_published is not None:
            published = [project for project in projects if project.is_published]
            if criteria.is_published:
                found = [project_evidence(p, "published", "Published", ["Yes"]) for p in published]
                results.append(PredicateResult.of("is_published", bool(published), found))
            else:
                results.append(PredicateResult.of("is_published", not published))

        if criteria.is_set("publish_platforms"):
            selected = key_set(criteria.publish_platforms)
            found = []
            for project in projects:
                values = matching_values(project.publish_platforms, selected)
                if values:
                    found.append(project_evidence(project, "publishPlatform", "Platform", values))
            results.append(PredicateResult.of("publish_platforms", bool(found), found))

        minimum = threshold(criteria, "min_download_count")
        if minimum is not None:
            scope = projects
            if criteria.is_set("job_titles"):
                titles = key_set(criteria.job_titles)
                scope = resolve_projects(
                    (
                        (experience, reference)
                        for experience, reference in iter_project_refs(candidate, include_standalone=False)
                        if title_matches(experience.job_title, titles)
                    ),
                    context,
                )
            found = [
                project_evidence(project, "downloads", "Downloads", [f"{project.download_count:,}"])
                for project in scope
                if project.download_count is not None and project.download_count >= minimum
            ]
            results.append(PredicateResult.of("min_download_count", bool(found), found))

        return results
