"""
Unit tests for the fixture dependency graph.

Key Concepts Demonstrated:
- Definition-time validation (cycles, unknown names)
- Dependency-first, at-most-once acquisition
- Reverse-order teardown that runs exactly once, also on failure
"""

import pytest

from blog_e2e.errors import FixtureCycleError, FixtureGraphError, UnknownFixtureError
from blog_e2e.fixture_graph import FixtureGraph


pytestmark = pytest.mark.unit


def _tracking_graph(events):
    """browser (external) -> context -> page -> home_page; api independent."""
    graph = FixtureGraph("tracking", provides=("browser",))

    @graph.fixture()
    def context(browser):
        events.append("acquire context")
        yield f"context<{browser}>"
        events.append("release context")

    @graph.fixture()
    def page(context):
        events.append("acquire page")
        yield f"page<{context}>"
        events.append("release page")

    @graph.fixture()
    def home_page(page):
        events.append("build home_page")
        return f"home<{page}>"

    @graph.fixture()
    def api():
        events.append("acquire api")
        yield "api"
        events.append("release api")

    return graph


class TestDefinition:
    """Tests for registering and validating fixtures."""

    def test_dependencies_default_to_parameter_names(self):
        graph = FixtureGraph("g", provides=("config",))

        @graph.fixture()
        def client(config):
            return config

        assert graph.definition("client").depends_on == ("config",)

    def test_cycle_is_detected_before_resolution(self):
        """Test that a cycle fails at freeze time and names the loop."""
        # Arrange
        graph = FixtureGraph("cyclic")
        graph.register("a", lambda b: b, depends_on=["b"])
        graph.register("b", lambda c: c, depends_on=["c"])
        graph.register("c", lambda a: a, depends_on=["a"])

        # Act
        with pytest.raises(FixtureCycleError) as exc_info:
            graph.freeze()

        # Assert
        assert exc_info.value.cycle == ["a", "b", "c", "a"]
        assert "a -> b -> c -> a" in str(exc_info.value)
        assert not graph.frozen

    def test_unknown_dependency_is_reported(self):
        graph = FixtureGraph("broken")
        graph.register("page", lambda context: context)

        with pytest.raises(UnknownFixtureError, match="context"):
            graph.validate()

    def test_duplicate_and_late_registration_fail(self):
        graph = FixtureGraph("g", provides=("browser",))
        graph.register("page", lambda: "page")

        with pytest.raises(FixtureGraphError):
            graph.register("page", lambda: "again")
        with pytest.raises(FixtureGraphError):
            graph.register("browser", lambda: "shadow")

        graph.freeze()
        with pytest.raises(FixtureGraphError):
            graph.register("late", lambda: "late")

    def test_order_for_lists_dependencies_first(self):
        graph = _tracking_graph([])

        assert graph.order_for("home_page") == ["context", "page", "home_page"]


class TestScope:
    """Tests for resolving fixtures inside a scope."""

    def test_dependencies_are_acquired_first_and_once(self):
        """Test that a fixture is built after its dependencies and cached."""
        # Arrange
        events = []
        graph = _tracking_graph(events)

        # Act
        with graph.open(browser="chromium") as scope:
            home = scope.get("home_page")
            again = scope.get("home_page")
            page = scope.get("page")
            order = list(scope.resolution_order)

        # Assert
        assert home is again
        assert page == "page<context<chromium>>"
        assert order == ["context", "page", "home_page"]
        assert events.count("acquire context") == 1

    def test_teardown_runs_in_reverse_order(self):
        """Test that resources are released in reverse acquisition order."""
        # Arrange
        events = []
        graph = _tracking_graph(events)

        # Act
        with graph.open(browser="chromium") as scope:
            scope.get("page")
            scope.get("api")

        # Assert
        assert events == [
            "acquire context",
            "acquire page",
            "acquire api",
            "release api",
            "release page",
            "release context",
        ]

    def test_release_runs_exactly_once_when_body_raises(self):
        """Test that a failing test body still releases every acquired fixture once."""
        # Arrange
        events = []
        graph = _tracking_graph(events)

        # Act
        with pytest.raises(RuntimeError, match="test failed"):
            with graph.open(browser="chromium") as scope:
                scope.get("home_page")
                raise RuntimeError("test failed")

        # Assert
        assert events.count("release page") == 1
        assert events.count("release context") == 1
        assert events[-2:] == ["release page", "release context"]

    def test_unused_fixtures_are_never_built(self):
        events = []
        graph = _tracking_graph(events)

        with graph.open(browser="chromium") as scope:
            scope.get("api")

        assert "acquire context" not in events

    def test_teardown_error_does_not_skip_other_releases(self):
        """Test that one failing teardown still lets the others run."""
        # Arrange
        events = []
        graph = FixtureGraph("fragile")

        @graph.fixture()
        def first():
            yield 1
            events.append("release first")

        @graph.fixture()
        def second(first):
            yield 2
            raise OSError("close failed")

        # Act
        with pytest.raises(OSError):
            with graph.open() as scope:
                scope.get("second")

        # Assert
        assert events == ["release first"]

    def test_externals_must_match_declaration(self):
        graph = _tracking_graph([])

        with pytest.raises(FixtureGraphError, match="missing"):
            with graph.open():
                pass
        with pytest.raises(FixtureGraphError, match="unexpected"):
            with graph.open(browser="chromium", extra=1):
                pass

    def test_scope_is_closed_after_exit(self):
        graph = _tracking_graph([])

        with graph.open(browser="chromium") as scope:
            pass

        with pytest.raises(FixtureGraphError, match="closed"):
            scope.get("page")

    def test_generator_that_does_not_yield(self):
        graph = FixtureGraph("empty")

        @graph.fixture()
        def nothing():
            return
            yield  # pragma: no cover

        with graph.open() as scope:
            with pytest.raises(FixtureGraphError, match="did not yield"):
                scope.get("nothing")
