"""
Declarative per-test fixture graph.

A :class:`FixtureGraph` maps fixture names to factories and their
dependencies. Factories follow pytest's convention: a generator function
yields its resource once and runs its teardown after the yield; a plain
function just returns the resource. Dependencies are the factory's
parameter names unless given explicitly.

The graph is checked when it is frozen (unknown names, cycles), before any
fixture is built. Opening a graph yields a :class:`FixtureScope`; fixtures
are built lazily on :meth:`FixtureScope.get`, dependencies first and each at
most once, and torn down in reverse order exactly once when the scope
closes, also when the body raised.

Usage:
    graph = FixtureGraph("example", provides=("browser",))

    @graph.fixture()
    def context(browser):
        ctx = browser.new_context()
        yield ctx
        ctx.close()

    with graph.open(browser=browser) as scope:
        scope.get("context")
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Generator, Iterable, Iterator
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass
from typing import Any

from blog_e2e.errors import FixtureCycleError, FixtureGraphError, UnknownFixtureError
from blog_e2e.log import resolve
from blog_e2e.messages import FixtureMessages

logger = logging.getLogger(__name__)

Factory = Callable[..., Any]


@dataclass(frozen=True)
class FixtureDef:
    name: str
    factory: Factory
    depends_on: tuple[str, ...]

    @property
    def is_generator(self) -> bool:
        return inspect.isgeneratorfunction(self.factory)


class FixtureGraph:
    """
    Registry of fixture definitions for one universe.

    Attributes:
        name: Universe name, used in error messages.
        externals: Names supplied by the caller of :meth:`open`.
    """

    def __init__(self, name: str, provides: Iterable[str] = ()):
        self.name = name
        self.externals = frozenset(provides)
        self._defs: dict[str, FixtureDef] = {}
        self._frozen = False

    def __contains__(self, name: str) -> bool:
        return name in self._defs

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._defs)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def definition(self, name: str) -> FixtureDef:
        try:
            return self._defs[name]
        except KeyError:
            raise UnknownFixtureError(f"{self.name}: unknown fixture {name!r}") from None

    def register(
        self,
        name: str,
        factory: Factory,
        depends_on: Iterable[str] | None = None,
    ) -> Factory:
        """
        Add a fixture definition.

        Args:
            name: Fixture name; must be new and not an external.
            factory: Generator or plain function building the resource.
            depends_on: Dependency names passed as keyword arguments;
                defaults to the factory's parameter names.

        Returns:
            The factory, so this can back a decorator.
        """
        if self._frozen:
            raise FixtureGraphError(f"{self.name}: graph is frozen, cannot register {name!r}")
        if name in self._defs or name in self.externals:
            raise FixtureGraphError(f"{self.name}: fixture {name!r} is already defined")
        if depends_on is None:
            depends_on = inspect.signature(factory).parameters
        self._defs[name] = FixtureDef(name, factory, tuple(depends_on))
        return factory

    def fixture(
        self, name: str | None = None, depends_on: Iterable[str] | None = None
    ) -> Callable[[Factory], Factory]:
        """Decorator form of :meth:`register`; the name defaults to the function's."""

        def decorator(factory: Factory) -> Factory:
            return self.register(name or factory.__name__, factory, depends_on)

        return decorator

    # -------------------------------------------------------------------------
    # Definition-time checks
    # -------------------------------------------------------------------------

    def validate(self) -> None:
        """
        Check every dependency exists and that there are no cycles.

        Raises:
            UnknownFixtureError: A dependency is neither a fixture nor an external.
            FixtureCycleError: Dependencies form a cycle; the error names it.
        """
        for definition in self._defs.values():
            for dependency in definition.depends_on:
                if dependency not in self._defs and dependency not in self.externals:
                    raise UnknownFixtureError(
                        f"{self.name}: fixture {definition.name!r} depends on "
                        f"unknown {dependency!r}"
                    )

        done: set[str] = set()
        path: list[str] = []

        def visit(name: str) -> None:
            if name in done or name in self.externals:
                return
            if name in path:
                raise FixtureCycleError(path[path.index(name):] + [name])
            path.append(name)
            for dependency in self._defs[name].depends_on:
                visit(dependency)
            path.pop()
            done.add(name)

        for name in self._defs:
            visit(name)

    def freeze(self) -> FixtureGraph:
        """Validate and lock the graph against further registration."""
        self.validate()
        self._frozen = True
        return self

    def order_for(self, name: str) -> list[str]:
        """Fixtures that must be built for ``name``, dependencies first."""
        order: list[str] = []

        def visit(current: str) -> None:
            if current in order or current in self.externals:
                return
            for dependency in self.definition(current).depends_on:
                visit(dependency)
            order.append(current)

        visit(name)
        return order

    # -------------------------------------------------------------------------
    # Scopes
    # -------------------------------------------------------------------------

    @contextmanager
    def open(self, run_logger: logging.Logger | None = None, **externals: Any) -> Iterator[FixtureScope]:
        """
        Open a per-test scope.

        Args:
            run_logger: Logger for acquire/release messages.
            **externals: Values for every name in :attr:`externals`.

        Yields:
            The scope; all fixtures it built are released on exit.
        """
        if not self._frozen:
            self.freeze()
        missing = self.externals - externals.keys()
        if missing:
            raise FixtureGraphError(f"{self.name}: missing externals {sorted(missing)}")
        unexpected = externals.keys() - self.externals
        if unexpected:
            raise FixtureGraphError(f"{self.name}: unexpected externals {sorted(unexpected)}")

        with ExitStack() as stack:
            scope = FixtureScope(self, externals, stack, resolve(run_logger, logger))
            try:
                yield scope
            finally:
                scope.closing = True


class FixtureScope:
    """
    Fixtures built for one test.

    Attributes:
        resolution_order: Names in the order they were built.
    """

    def __init__(
        self,
        graph: FixtureGraph,
        externals: dict[str, Any],
        stack: ExitStack,
        run_logger: logging.Logger,
    ):
        self.graph = graph
        self.logger = run_logger
        self.resolution_order: list[str] = []
        self.closing = False
        self._externals = dict(externals)
        self._values: dict[str, Any] = {}
        self._stack = stack

    def __contains__(self, name: str) -> bool:
        return name in self._values or name in self._externals

    def get(self, name: str) -> Any:
        """Return fixture ``name``, building it and its dependencies on first use."""
        if name in self._externals:
            return self._externals[name]
        if name in self._values:
            return self._values[name]
        if self.closing:
            raise FixtureGraphError(f"{self.graph.name}: scope is closed, cannot build {name!r}")

        definition = self.graph.definition(name)
        kwargs = {dependency: self.get(dependency) for dependency in definition.depends_on}

        if definition.is_generator:
            generator = definition.factory(**kwargs)
            try:
                value = next(generator)
            except StopIteration:
                raise FixtureGraphError(
                    f"{self.graph.name}: fixture {name!r} did not yield a value"
                ) from None
            self._stack.callback(self._release, name, generator)
        else:
            value = definition.factory(**kwargs)

        self._values[name] = value
        self.resolution_order.append(name)
        self.logger.debug(FixtureMessages.ACQUIRED, name)
        return value

    def _release(self, name: str, generator: Generator[Any, None, None]) -> None:
        try:
            next(generator)
        except StopIteration:
            pass
        else:
            raise FixtureGraphError(f"{self.graph.name}: fixture {name!r} yielded more than once")
        finally:
            self.logger.debug(FixtureMessages.RELEASED, name)
