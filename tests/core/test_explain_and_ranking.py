from __future__ import annotations

from datetime import date

import pytest

from talentfilter.core import (
    CandidateSearch,
    EvaluationContext,
    FilterEngine,
    MatchExplainer,
    ReferenceData,
    rank,
    resolve_as_of,
)
from talentfilter.core.explain import group_evidence
from talentfilter.core.metrics import today
from talentfilter.core.ranking import name_sort_key
from talentfilter.core.results import MatchContext, PredicateResult, evidence
from talentfilter.schemas import (
    Candidate,
    DatasetSnapshot,
    EntityFilters,
    EntityRef,
    FilterCriteria,
)

AS_OF = date(2024, 6, 1)


def build_candidate(candidate_id: str, name: str, **fields) -> Candidate:
    data = {
        "id": candidate_id,
        "name": name,
        "city": "Lahore",
        "work_experiences": [
            {
                "employer_name": "Acme",
                "job_title": "Software Engineer",
                "work_mode": "Remote",
                "tech_stacks": ["React"],
                "start_date": "2020-01-01",
                "end_date": "2022-07-15",
            }
        ],
    }
    data.update(fields)
    return Candidate.model_validate(data)


def build_context(candidates: list[Candidate] | None = None) -> EvaluationContext:
    return EvaluationContext(reference=ReferenceData(), candidates=candidates or [], as_of=AS_OF)


def test_empty_criteria_matches_everyone():
    engine = FilterEngine()
    context = build_context()
    candidates = [
        build_candidate("C-1", "A"),
        Candidate(id="C-2"),
        build_candidate("C-3", "B", work_experiences=[], city=None),
    ]

    assert all(engine.matches(candidate, FilterCriteria(), context) for candidate in candidates)
    assert FilterCriteria(cities=["  "], job_titles=[""]).is_empty() is True


def test_raising_min_years_never_grows_matched_set():
    engine = FilterEngine()
    context = build_context()
    candidates = [
        build_candidate(
            f"C-{index}",
            f"Name {index}",
            work_experiences=[
                {
                    "employer_name": "Acme",
                    "tech_stacks": ["React", "Node"],
                    "start_date": f"{2024 - index}-01-01",
                }
            ],
        )
        for index in range(1, 8)
    ]

    previous: set[str] | None = None
    for min_years in ["0", "1", "2.5", "3", "5", "8"]:
        criteria = FilterCriteria(
            tech_stack_min_years={"tech_stacks": ["React", "Node"], "min_years": min_years}
        )
        matched = {c.id for c in candidates if engine.matches(c, criteria, context)}
        if previous is not None:
            assert matched <= previous
        previous = matched


def test_tech_stack_min_years_requires_every_selected_stack():
    engine = FilterEngine()
    candidate = build_candidate("C-1", "A")
    context = build_context()

    only_react = FilterCriteria(tech_stack_min_years={"tech_stacks": ["React"], "min_years": "2.5"})
    with_vue = FilterCriteria(tech_stack_min_years={"tech_stacks": ["React", "Vue"], "min_years": "1"})

    assert engine.matches(candidate, only_react, context) is True
    assert engine.matches(candidate, with_vue, context) is False


def test_explanation_groups_by_category_then_subject():
    candidate = build_candidate("C-1", "A")
    criteria = FilterCriteria(
        job_titles=["engineer"],
        work_modes=["remote"],
        cities=["Lahore"],
        candidate_tech_stacks=["react"],
    )
    explainer = MatchExplainer(FilterEngine())

    match_context = explainer.explain(candidate, criteria, build_context())

    assert [category.type for category in match_context.categories] == [
        "basic",
        "experience",
        "projects",
    ]
    experience = match_context.categories[1]
    assert [item.name for item in experience.items] == ["Acme - Software Engineer"]
    assert [c.type for c in experience.items[0].matched_criteria] == ["jobTitle", "workMode"]
    assert experience.items[0].context["employer_name"] == "Acme"
    assert match_context.total_matches == 3


def test_group_evidence_merges_values_and_skips_failed_results():
    first = evidence("projects", "Ledger", "techStack", "Tech Stack", ["Go"])
    second = evidence("projects", "Ledger", "techStack", "Tech Stack", ["Go", "Rust"])
    failed = evidence("employers", "Acme", "employer", "Employer", ["Acme"])

    categories = group_evidence(
        [
            PredicateResult.of("tech_stacks", True, [first]),
            PredicateResult.of("candidate_tech_stacks", True, [second]),
            PredicateResult.of("employers", False, [failed]),
        ]
    )

    assert len(categories) == 1
    item = categories[0].items[0]
    assert item.matched_criteria[0].values == ("Go", "Rust")
    assert categories[0].label == "Project Expertise"


def test_entity_filters_contribute_evidence():
    candidate = build_candidate("C-1", "A")
    explainer = MatchExplainer(FilterEngine())
    filters = EntityFilters(employer=EntityRef(name="acme"))

    match_context = explainer.explain(candidate, FilterCriteria(), build_context(), filters)

    assert match_context.total_matches == 1
    assert match_context.categories[0].type == "employers"


def test_name_sort_key_ignores_case_and_accents():
    names = ["émile", "Zara", "ali", "Bilal"]

    assert sorted(names, key=name_sort_key) == ["ali", "Bilal", "émile", "Zara"]


def test_rank_orders_by_total_then_name():
    candidates = [
        build_candidate("C-1", "Émile"),
        build_candidate("C-2", "zara"),
        build_candidate("C-3", "bilal"),
        build_candidate("C-4", "Ali"),
    ]
    totals = {"C-1": 1, "C-2": 2, "C-3": 1, "C-4": 1}
    contexts = {
        candidate_id: MatchContext(candidate_id=candidate_id, total_matches=total, categories=[])
        for candidate_id, total in totals.items()
    }

    ranked = rank(candidates, contexts, active=True)
    untouched = rank(candidates, contexts, active=False)

    assert [c.name for c in ranked] == ["zara", "Ali", "bilal", "Émile"]
    assert [c.id for c in untouched] == ["C-1", "C-2", "C-3", "C-4"]


def build_snapshot() -> DatasetSnapshot:
    return DatasetSnapshot(
        candidates=[
            build_candidate("C-1", "Zain"),
            build_candidate("C-2", "Asad", city="Karachi"),
            build_candidate("C-3", "Maha", work_experiences=[]),
            build_candidate(
                "C-4",
                "Bushra",
                work_experiences=[{"employer_name": "Beta", "job_title": "Engineer"}],
            ),
        ]
    )


def test_search_without_filters_keeps_input_order():
    result = CandidateSearch().search(build_snapshot(), FilterCriteria(), as_of="2024-06")

    assert result.active is False
    assert result.match_contexts == {}
    assert [c.id for c in result.candidates] == ["C-1", "C-2", "C-3", "C-4"]


def test_search_filters_explains_and_ranks():
    criteria = FilterCriteria(job_titles=["engineer"], cities=["lahore"])

    result = CandidateSearch().search(build_snapshot(), criteria, as_of=AS_OF)

    assert result.active is True
    assert [c.id for c in result.candidates] == ["C-4", "C-1"]
    assert result.match_contexts["C-1"].total_matches == 2
    assert result.match_contexts["C-4"].total_matches == 2


def test_search_applies_entity_filters_before_criteria():
    filters = EntityFilters(employer=EntityRef(name="Beta"))

    result = CandidateSearch().search(build_snapshot(), FilterCriteria(), entity_filters=filters)

    assert result.active is True
    assert [c.id for c in result.candidates] == ["C-4"]


@pytest.mark.parametrize("as_of", [None, "2024-06", "2024-06-01T10:00:00", date(2024, 6, 1), "garbage"])
def test_search_accepts_reference_date_forms(as_of):
    result = CandidateSearch().search(build_snapshot(), FilterCriteria(min_years_of_experience="1"), as_of=as_of)

    assert "C-1" in {c.id for c in result.candidates}


@pytest.mark.parametrize("value", ["P2D", "10:00"])
def test_non_date_reference_values_fall_back_to_today(value):
    assert resolve_as_of(value) == today()


def test_candidate_tech_stacks_require_all():
    engine = FilterEngine()
    candidate = build_candidate("C-1", "A")
    context = build_context()

    assert engine.matches(candidate, FilterCriteria(candidate_tech_stacks=["react", "vue"]), context) is True
    assert engine.matches(
        candidate,
        FilterCriteria(candidate_tech_stacks=["react", "vue"], candidate_tech_stacks_require_all=True),
        context,
    ) is False
    assert engine.matches(
        candidate,
        FilterCriteria(candidate_tech_stacks=["React"], candidate_tech_stacks_require_all=True),
        context,
    ) is True


def test_repeated_stints_and_degrees_stay_separate_items():
    candidate = build_candidate(
        "C-1",
        "A",
        work_experiences=[
            {"employer_name": "DPL", "start_date": "2016-01-01", "end_date": "2018-01-01"},
            {"employer_name": "DPL", "start_date": "2020-01-01"},
        ],
        educations=[
            {"university_location_id": "L-9", "university_location_name": "NUST - H12", "degree_name": "BS"},
            {"university_location_id": "L-9", "university_location_name": "NUST - H12", "degree_name": "MS"},
        ],
    )
    criteria = FilterCriteria(employers=["DPL"], degree_names=["BS", "MS"])

    match_context = MatchExplainer(FilterEngine()).explain(candidate, criteria, build_context())

    assert [category.count for category in match_context.categories] == [2, 2]
    assert [item.name for item in match_context.categories[0].items] == ["DPL", "DPL"]
    assert match_context.total_matches == 4


def test_search_keeps_metrics_apart_for_candidates_sharing_an_id():
    snapshot = DatasetSnapshot(
        candidates=[
            build_candidate(
                "X",
                "A",
                work_experiences=[{"employer_name": "Acme", "start_date": "2014-01-01", "end_date": "2024-01-01"}],
            ),
            build_candidate(
                "X",
                "B",
                work_experiences=[{"employer_name": "Beta", "start_date": "2023-01-01", "end_date": "2024-01-01"}],
            ),
        ]
    )

    result = CandidateSearch().search(snapshot, FilterCriteria(min_years_of_experience="5"), as_of=AS_OF)

    assert [c.name for c in result.candidates] == ["A"]
