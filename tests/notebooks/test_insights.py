"""
Tests for collection analytics.
"""
from collab_hunter.models.notebooks import Collection
from collab_hunter.notebooks.insights import case_timeline, top_keywords, trend_categories
from collab_hunter.structured_outputs.trend_outputs import TrendItem

from conftest import make_case


def trend(name, category):
    return TrendItem(ipName=name, category=category, reason="r", targetAudience="a")


class TestInsights:
    def test_case_timeline(self):
        notebook = Collection(
            id="n",
            name="n",
            cases=[
                make_case(date="2024.05.12"),
                make_case(date="2023-11"),
                make_case(date="2024/05/01"),
                make_case(date="2022"),
                make_case(date="unknown"),
            ],
            createdAt=1,
            updatedAt=1,
        )
        assert case_timeline(notebook) == [("2023-11", 1), ("2024-05", 2)]

    def test_trend_categories_descending(self):
        report = Collection(
            id="r",
            type="report",
            name="r",
            trends=[trend("a", "Anime"), trend("b", "Game"), trend("c", "Game"), trend("d", "Art toy"), trend("e", "Game")],
            createdAt=1,
            updatedAt=1,
        )
        categories = trend_categories(report)
        assert categories[0] == ("Game", 3)
        assert sorted(categories[1:]) == [("Anime", 1), ("Art toy", 1)]

    def test_top_keywords(self):
        notebook = Collection(
            id="n",
            name="n",
            cases=[
                make_case(partnerIntro="Pokemon brand with collab history", productName="Pokemon cookies"),
                make_case(partnerIntro="Pokemon from Japan", productName="Sanrio cookies"),
            ],
            createdAt=1,
            updatedAt=1,
        )
        keywords = dict(top_keywords(notebook))
        assert keywords["pokemon"] == 3
        assert keywords["cookies"] == 2
        for stop in ("brand", "with", "from", "collab"):
            assert stop not in keywords
        assert len(top_keywords(notebook)) <= 5

    def test_empty_collection(self):
        empty = Collection(id="n", name="n", createdAt=1, updatedAt=1)
        assert case_timeline(empty) == []
        assert trend_categories(empty) == []
        assert top_keywords(empty) == []
