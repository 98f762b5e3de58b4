"""
Tests for search filter validation and query building.

Run with:
    python -m pytest tests/test_search.py
"""
import unittest

from pydantic import ValidationError
from sqlmodel import Session

from topgames.catalog.search import (
    NoGamesFound,
    SearchFilters,
    build_search_statement,
    search_games,
)
from topgames.models.game import Game

from support import make_engine


class TestSearchFilters(unittest.TestCase):

    def test_name_is_trimmed(self):
        self.assertEqual(SearchFilters(name="  Cat ").name, "Cat")

    def test_platform_is_trimmed_and_lowercased(self):
        self.assertEqual(SearchFilters(platform=" IOS ").platform, "ios")

    def test_blank_values_are_absent(self):
        filters = SearchFilters(name="   ", platform="")
        self.assertIsNone(filters.name)
        self.assertIsNone(filters.platform)

    def test_non_string_name_rejected(self):
        with self.assertRaises(ValidationError):
            SearchFilters(name=123)

    def test_non_string_platform_rejected(self):
        with self.assertRaises(ValidationError):
            SearchFilters(platform=["ios"])


class TestBuildSearchStatement(unittest.TestCase):

    def test_no_filters_has_no_where_clause(self):
        sql = str(build_search_statement(SearchFilters()))
        self.assertNotIn("WHERE", sql)

    def test_both_filters_are_combined_with_and(self):
        sql = str(build_search_statement(SearchFilters(name="Cat", platform="ios")))
        self.assertIn("LIKE", sql)
        self.assertIn("AND", sql)


class TestSearchGames(unittest.TestCase):

    def setUp(self):
        self.engine = make_engine()
        self.addCleanup(self.engine.dispose)
        with Session(self.engine) as session:
            session.add_all([
                Game(name="Cat Quest", platform="android"),
                Game(name="Cat Quest", platform="ios"),
                Game(name="Super Cats", platform="ios"),
                Game(name="Dog Run", platform="android"),
            ])
            session.commit()

    def _search(self, **kwargs):
        with Session(self.engine) as session:
            return search_games(session, SearchFilters(**kwargs))

    def test_name_substring(self):
        names = sorted(g.name for g in self._search(name=" Cat "))
        self.assertEqual(names, ["Cat Quest", "Cat Quest", "Super Cats"])

    def test_platform_exact(self):
        games = self._search(platform=" IOS ")
        self.assertEqual(len(games), 2)
        self.assertTrue(all(g.platform == "ios" for g in games))

    def test_name_and_platform(self):
        games = self._search(name="Cat", platform="android")
        self.assertEqual([(g.name, g.platform) for g in games], [("Cat Quest", "android")])

    def test_no_filters_lists_everything(self):
        self.assertEqual(len(self._search()), 4)

    def test_no_matches_raises(self):
        with self.assertRaises(NoGamesFound):
            self._search(name="Zelda")


if __name__ == "__main__":
    unittest.main()
