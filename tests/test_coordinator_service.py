from datetime import datetime

import pytest

from app.services.coordinator_service import (
    months_before, percentage, internship_growth, placement_label
)


@pytest.mark.parametrize("moment, months, expected", [
    (datetime(2025, 10, 18, 9, 30), 4, datetime(2025, 6, 18, 9, 30)),
    (datetime(2025, 2, 10), 4, datetime(2024, 10, 10)),
    (datetime(2025, 6, 30), 4, datetime(2025, 2, 28)),
    (datetime(2024, 6, 30), 4, datetime(2024, 2, 29)),
    (datetime(2026, 3, 5), 24, datetime(2024, 3, 5)),
])
def test_months_before(moment, months, expected):
    assert months_before(moment, months) == expected


def test_percentage_rounds_half_up():
    assert percentage(1, 8) == 13
    assert percentage(2, 5) == 40
    assert percentage(1, 3) == 33
    assert percentage(0, 0) == 0
    assert percentage(3, 0) == 0


def test_internship_growth_orders_semesters():
    created = [
        datetime(2025, 7, 1),
        datetime(2024, 1, 3),
        datetime(2025, 6, 30),
        datetime(2024, 12, 31),
        datetime(2025, 1, 15),
    ]
    assert internship_growth(created) == [
        {"semester": "Spring 2024", "internships": 1},
        {"semester": "Fall 2024", "internships": 1},
        {"semester": "Spring 2025", "internships": 2},
        {"semester": "Fall 2025", "internships": 1},
    ]
    assert internship_growth([]) == []


@pytest.mark.parametrize("statuses, expected", [
    (["completed", "active"], "active"),
    (["terminated", "completed"], "completed"),
    (["pending", "terminated"], "pending"),
    ([], "pending"),
])
def test_placement_label(statuses, expected):
    assert placement_label(statuses) == expected
