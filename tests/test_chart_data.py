from __future__ import annotations

import pytest

pytest.importorskip("PySide6")

from taskboard.models import Category, Project, ProjectTask
from taskboard.ops.chart_data import build_category_chart
from tests.helpers.dashboard_fakes import sample_data


def test_counts_follow_category_order_and_colors_are_parallel() -> None:
    categories, projects, _ = sample_data()

    data, colors = build_category_chart(categories, projects)

    assert [(d.title, d.count) for d in data] == [("Work", 2), ("Home", 1)]
    assert [c.name().upper() for c in colors] == ["#2196F3", "#4CAF50"]


def test_bucket_sum_excludes_projects_without_a_listed_category() -> None:
    categories, projects, _ = sample_data()
    known = {c.id for c in categories}

    data, _ = build_category_chart(categories, projects)

    expected = sum(p.task_count for p in projects if p.category_id in known)
    assert sum(d.count for d in data) == expected == 3


def test_multiple_projects_in_one_category_are_summed() -> None:
    cat = Category(5, "Errands", "#000000")
    projects = [
        Project(1, "A", category_id=5, tasks=[ProjectTask(1, "x"), ProjectTask(2, "y")]),
        Project(2, "B", category_id=5, tasks=[ProjectTask(3, "z")]),
        Project(3, "C", category_id=None, tasks=[ProjectTask(4, "w")]),
    ]

    data, _ = build_category_chart([cat], projects)

    assert data[0].count == 3


def test_task_added_to_project_after_load_is_counted() -> None:
    cat = Category(1, "Work")
    project = Project(1, "A", category_id=1)
    project.tasks.append(ProjectTask(7, "late"))

    data, _ = build_category_chart([cat], [project])

    assert data[0].count == 1


def test_empty_inputs_give_empty_output() -> None:
    assert build_category_chart([], []) == ([], [])

    data, colors = build_category_chart([Category(1, "Work")], [])
    assert [d.count for d in data] == [0]
    assert len(colors) == 1


def test_invalid_color_falls_back_to_grey() -> None:
    _, colors = build_category_chart([Category(1, "Odd", "not-a-color")], [])

    assert colors[0].isValid()
    assert colors[0].name() == "#808080"
