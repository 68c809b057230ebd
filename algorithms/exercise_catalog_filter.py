from typing import Iterable, Mapping


class ExerciseCatalogFilter:
    """Search and filter the exercise catalog."""

    ALL = "all"

    @staticmethod
    def _contains(text: object, term: str) -> bool:
        if not isinstance(text, str):
            return False
        return term in text.lower()

    @classmethod
    def matches(
        cls,
        exercise: Mapping,
        search_term: str = "",
        category: str = ALL,
        difficulty: str = ALL,
    ) -> bool:
        """Return ``True`` when ``exercise`` satisfies all three criteria."""
        if search_term:
            term = search_term.lower()
            if not (
                cls._contains(exercise.get("name"), term)
                or cls._contains(exercise.get("description"), term)
            ):
                return False
        if category and category != cls.ALL and exercise.get("category") != category:
            return False
        if (
            difficulty
            and difficulty != cls.ALL
            and exercise.get("difficulty") != difficulty
        ):
            return False
        return True

    @classmethod
    def filter(
        cls,
        catalog: Iterable[Mapping],
        search_term: str = "",
        category: str = ALL,
        difficulty: str = ALL,
    ) -> list[Mapping]:
        """Return the exercises matching every criterion in catalog order.

        An empty ``search_term`` and the ``"all"`` sentinel disable the
        respective filter. An empty result is a valid "no matches" state.
        """
        return [
            e for e in catalog if cls.matches(e, search_term, category, difficulty)
        ]

    @classmethod
    def filter_with(
        cls, catalog: Iterable[Mapping], criteria: Mapping | None = None
    ) -> list[Mapping]:
        criteria = criteria or {}
        return cls.filter(
            catalog,
            criteria.get("search_term") or "",
            criteria.get("category") or cls.ALL,
            criteria.get("difficulty") or cls.ALL,
        )

    @staticmethod
    def categories(catalog: Iterable[Mapping]) -> list[str]:
        return sorted({e["category"] for e in catalog if e.get("category")})

    @staticmethod
    def difficulties(catalog: Iterable[Mapping]) -> list[str]:
        return sorted({e["difficulty"] for e in catalog if e.get("difficulty")})
