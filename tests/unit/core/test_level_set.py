"""
Tests for LevelSet and TopicScope.
"""

import itertools
import threading

import pytest

from chainlog.core.level import Level
from chainlog.core.level_set import LevelSet
from chainlog.core.topicscope import ANY, TopicScope


class TestTopicScope:
    """Tests for TopicScope."""

    @pytest.mark.parametrize("value", [None, "", "*", "any"])
    def test_wildcards_normalize_to_any(self, value):
        """None, "", "*" and "any" are the wildcard."""
        key = TopicScope.of(value, value)
        assert key.topic == ANY
        assert key.scope == ANY
        assert key.is_default

    def test_match(self):
        """Wildcards match anything, other values match themselves."""
        assert TopicScope.of("db", None).match("db", "query")
        assert not TopicScope.of("db", None).match("http", "query")
        assert TopicScope.of(None, "query").match("http", "query")
        assert TopicScope.of("db", "query").match("db", "query")
        assert not TopicScope.of("db", "query").match("db", "commit")
        assert TopicScope().match("anything", "else")

    def test_specificity(self):
        """Topic+scope beats topic, which beats scope, which beats the default."""
        assert TopicScope.of("a", "b").specificity == 3
        assert TopicScope.of("a", None).specificity == 2
        assert TopicScope.of(None, "b").specificity == 1
        assert TopicScope().specificity == 0


class TestLevelSetGet:
    """Tests for LevelSet.get precedence."""

    def test_empty_set_is_unset(self):
        """An empty set resolves to UNSET."""
        assert LevelSet().get("db", "query") is Level.UNSET
        assert LevelSet().should_write(Level.TRACE, "db", "query")

    def test_precedence(self):
        """exact, then topic, then scope, then default."""
        levels = LevelSet(default=Level.INFO)
        levels.set(Level.ERROR, None, "query")
        levels.set(Level.WARN, "db")
        levels.set(Level.DEBUG, "db", "query")

        assert levels.get("db", "query") is Level.DEBUG
        assert levels.get("db", "commit") is Level.WARN
        assert levels.get("http", "query") is Level.ERROR
        assert levels.get("http", "main") is Level.INFO

    def test_no_default_and_no_match_is_unset(self):
        """Without a default, unmatched pairs resolve to UNSET."""
        levels = LevelSet().set(Level.WARN, "db")
        assert levels.get("http", "main") is Level.UNSET

    def test_get_agrees_with_match_by_specificity(self):
        """get() equals the most specific matching key found by exhaustive search."""
        levels = LevelSet.parse("INFO;WARN:{db};ERROR:{:query};DEBUG:{db:commit}")
        for topic, scope in itertools.product(["db", "http", "main"], ["query", "commit", "main"]):
            matching = [key for key, _ in levels.items() if key.match(topic, scope)]
            best = max(matching, key=lambda key: key.specificity)
            assert levels.get(topic, scope) is dict(levels.items())[best], (topic, scope)

    def test_set_default_if_unset(self):
        """set_default_if_unset keeps an existing default."""
        levels = LevelSet(default=Level.WARN)
        levels.set_default_if_unset(Level.DEBUG)
        assert levels.get_default() is Level.WARN

        empty = LevelSet().set_default_if_unset(Level.DEBUG)
        assert empty.get_default() is Level.DEBUG

    def test_remove(self):
        """remove() drops a rule."""
        levels = LevelSet.parse("INFO;DEBUG:{db}")
        levels.remove("db")
        assert levels.get("db", "main") is Level.INFO


class TestLevelSetParse:
    """Tests for LevelSet.parse and str()."""

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_blank_is_info(self, text):
        """Blank text gives a single INFO default rule."""
        levels = LevelSet.parse(text)
        assert len(levels) == 1
        assert levels.get_default() is Level.INFO

    def test_full_grammar(self):
        """Every clause form is understood."""
        levels = LevelSet.parse("INFO; DEBUG:{db}; TRACE:{db:query, commit}; ERROR:{:audit}")

        assert levels.get_default() is Level.INFO
        assert levels.get("db", "main") is Level.DEBUG
        assert levels.get("db", "query") is Level.TRACE
        assert levels.get("db", "commit") is Level.TRACE
        assert levels.get("http", "audit") is Level.ERROR
        assert len(levels) == 5

    def test_unknown_level_is_never(self):
        """Unknown names become NEVER, which blocks the topic."""
        levels = LevelSet.parse("INFO;verbose:{db}")
        assert levels.get("db", "main") is Level.NEVER
        assert not levels.should_write(Level.FATAL, "db", "main")

    def test_later_clause_wins(self):
        """A later clause for the same key supersedes the earlier one."""
        levels = LevelSet.parse("DEBUG:{db};WARN:{db}")
        assert levels.get("db", "main") is Level.WARN

    def test_string_form(self):
        """str() writes the default first, then the other clauses."""
        levels = LevelSet.parse("DEBUG:{db:query};INFO;ERROR:{:audit};WARN:{db}")
        assert str(levels) == "INFO;ERROR:{:audit};WARN:{db};DEBUG:{db:query}"

    @pytest.mark.parametrize("text", [
        "INFO",
        "WARN;DEBUG:{db}",
        "ERROR;TRACE:{db:query,commit};INFO:{:audit}",
        "NEVER;ALWAYS:{alerts}",
    ])
    def test_parse_of_string_is_equivalent(self, text):
        """parse(str(x)) == x."""
        levels = LevelSet.parse(text)
        assert LevelSet.parse(str(levels)) == levels


class TestLevelSetFiltering:
    """Tests for filter_more and filter_less."""

    def test_filter_more_and_less_step_the_default(self):
        """The default rule moves one step each call."""
        levels = LevelSet(default=Level.INFO)
        levels.filter_more()
        assert levels.get_default() is Level.WARN
        levels.filter_less().filter_less()
        assert levels.get_default() is Level.DEBUG

    def test_other_rules_are_untouched(self):
        """Only the default rule moves."""
        levels = LevelSet.parse("INFO;DEBUG:{db}")
        levels.filter_more()
        assert levels.get("db", "main") is Level.DEBUG

    def test_filter_more_saturates(self):
        """ALWAYS stays ALWAYS."""
        levels = LevelSet(default=Level.ALWAYS)
        levels.filter_more()
        assert levels.get_default() is Level.ALWAYS


class TestLevelSetConcurrency:
    """Readers and writers running together."""

    def test_readers_see_complete_snapshots(self):
        """Concurrent get() never fails while writers replace rules."""
        levels = LevelSet.parse("INFO")
        errors = []
        stop = threading.Event()

        def reader():
            while not stop.is_set():
                try:
                    level = levels.get("db", "query")
                    assert level in (Level.INFO, Level.DEBUG, Level.WARN)
                except Exception as e:
                    errors.append(e)
                    return

        def writer(level):
            for _ in range(500):
                levels.set(level, "db")
                levels.set(level, "db", "query")

        readers = [threading.Thread(target=reader) for _ in range(4)]
        writers = [threading.Thread(target=writer, args=(lvl,)) for lvl in (Level.DEBUG, Level.WARN)]
        for thread in readers + writers:
            thread.start()
        for thread in writers:
            thread.join()
        stop.set()
        for thread in readers:
            thread.join()

        assert errors == []
        assert levels.get("db", "query") in (Level.DEBUG, Level.WARN)
