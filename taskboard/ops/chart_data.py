from __future__ import annotations

from collections.abc import Iterable, Sequence

from PySide6.QtGui import QColor

from taskboard.models import Category, CategoryChartDatum, Project

_FALLBACK_COLOR = "#808080"


def category_color(category: Category) -> QColor:
    color = QColor(category.color)
    if not color.isValid():
        color = QColor(_FALLBACK_COLOR)
    return color


def build_category_chart(
    categories: Sequence[Category],
    projects: Iterable[Project],
) -> tuple[list[CategoryChartDatum], list[QColor]]:
    """Count tasks per category, in category order.

    Returns parallel lists: one datum and one color per category. Tasks on
    projects whose category is not in ``categories`` land in no bucket.
    """
    projects = list(projects)
    data: list[CategoryChartDatum] = []
    colors: list[QColor] = []
    for category in categories:
        count = sum(p.task_count for p in projects if p.category_id == category.id)
        data.append(CategoryChartDatum(category.title, count))
        colors.append(category_color(category))
    return data, colors
