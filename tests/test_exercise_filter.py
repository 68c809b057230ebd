import os
import sys
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from algorithms import ExerciseCatalogFilter

CATALOG = [
    {"id": "1", "name": "Bench Press", "description": "Press from the chest.", "category": "strength", "difficulty": "intermediate"},
    {"id": "2", "name": "Running", "description": None, "category": "cardio", "difficulty": "beginner"},
    {"id": "3", "name": "Sprint Intervals", "description": "Short all-out RUNS.", "category": "cardio", "difficulty": "advanced"},
    {"id": "4", "name": "Hamstring Stretch", "description": "Loosen the legs.", "category": "flexibility", "difficulty": "beginner"},
    {"id": "5", "name": "Jump Rope", "description": None, "category": "cardio", "difficulty": "beginner"},
]


def ids(rows) -> list[str]:
    return [r["id"] for r in rows]


class ExerciseCatalogFilterTest(unittest.TestCase):
    def test_search_matches_name_or_description(self) -> None:
        result = ExerciseCatalogFilter.filter(CATALOG, "run", "all", "all")
        self.assertEqual(ids(result), ["2", "3"])

    def test_category_only(self) -> None:
        result = ExerciseCatalogFilter.filter(CATALOG, "", "cardio", "all")
        self.assertEqual(ids(result), ["2", "3", "5"])

    def test_predicates_are_anded(self) -> None:
        result = ExerciseCatalogFilter.filter(CATALOG, "r", "cardio", "beginner")
        self.assertEqual(ids(result), ["2", "5"])

    def test_no_filters_returns_everything_in_order(self) -> None:
        self.assertEqual(ids(ExerciseCatalogFilter.filter(CATALOG)), ["1", "2", "3", "4", "5"])

    def test_no_matches_is_empty(self) -> None:
        self.assertEqual(ExerciseCatalogFilter.filter(CATALOG, "zumba"), [])
        self.assertEqual(ExerciseCatalogFilter.filter(CATALOG, "", "strength", "advanced"), [])

    def test_missing_description_only_skips_that_field(self) -> None:
        result = ExerciseCatalogFilter.filter(CATALOG, "JUMP")
        self.assertEqual(ids(result), ["5"])

    def test_criteria_mapping(self) -> None:
        result = ExerciseCatalogFilter.filter_with(
            CATALOG, {"search_term": "", "category": "cardio", "difficulty": "advanced"}
        )
        self.assertEqual(ids(result), ["3"])
        self.assertEqual(len(ExerciseCatalogFilter.filter_with(CATALOG)), 5)

    def test_filter_choices(self) -> None:
        self.assertEqual(
            ExerciseCatalogFilter.categories(CATALOG), ["cardio", "flexibility", "strength"]
        )
        self.assertEqual(
            ExerciseCatalogFilter.difficulties(CATALOG), ["advanced", "beginner", "intermediate"]
        )


if __name__ == "__main__":
    unittest.main()
