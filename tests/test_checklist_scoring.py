"""Tests for checklist status / KPI derivation and pagination defaults."""

import pytest

from franchise_saas.models.checklist import ProgressStatus
from franchise_saas.services.checklist_store import (compute_kpi_score,
                                                     derive_status,
                                                     normalise_page)


@pytest.mark.parametrize(
    "statuses, expected_status, expected_score",
    [
        ([], ProgressStatus.PENDING, 0.0),
        (["pending", "pending"], ProgressStatus.PENDING, 0.0),
        (["completed", "completed"], ProgressStatus.COMPLETED, 100.0),
        (["pending", "in_progress"], ProgressStatus.IN_PROGRESS, 0.0),
        (["pending", "completed"], ProgressStatus.IN_PROGRESS, 50.0),
        (["completed", "completed", "completed", "pending"], ProgressStatus.IN_PROGRESS, 75.0),
    ],
)
def test_status_and_score_follow_tasks(statuses, expected_status, expected_score):
    assert derive_status(statuses) is expected_status
    assert compute_kpi_score(statuses) == pytest.approx(expected_score)


def test_score_is_completed_ratio():
    score = compute_kpi_score(["completed", "in_progress", "pending"])
    assert score == pytest.approx(100 / 3)


def test_derivation_accepts_enum_members():
    statuses = [ProgressStatus.COMPLETED, ProgressStatus.IN_PROGRESS]
    assert derive_status(statuses) is ProgressStatus.IN_PROGRESS
    assert compute_kpi_score(statuses) == pytest.approx(50.0)


def test_unknown_status_is_rejected():
    with pytest.raises(ValueError):
        derive_status(["done"])


@pytest.mark.parametrize(
    "page, size, expected",
    [
        (None, None, (1, 10)),
        ("2", "25", (2, 25)),
        ("0", "10", (1, 10)),
        ("-3", None, (1, 10)),
        ("abc", "xyz", (1, 10)),
        (3, 1000, (3, 100)),
        (1, 0, (1, 1)),
        (1, -5, (1, 1)),
    ],
)
def test_normalise_page(page, size, expected):
    assert normalise_page(page, size) == expected
