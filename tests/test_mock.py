import unittest
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from refbind import Container, ResolutionError, Token


class TestRegisterMock(unittest.TestCase):
    cont: Container

    class TestClass:
        DEPS = []

        def value(self) -> str:
            return "real-value"

    def setUp(self):
        self.cont = Container()

    def test_nested_overlay_resolution_returns_mock(self):
        mock = SimpleNamespace(value=lambda: "mocked-value")
        self.cont.register_mock(self.TestClass, mock)

        result = self.cont.resolve(self.TestClass, use_overlay=True, is_root=False)

        assert result is mock
        assert result.value() == "mocked-value"

    def test_mock_registered_without_value_resolves_to_none(self):
        self.cont.register_mock(self.TestClass)
        assert self.cont.resolve(self.TestClass, use_overlay=True, is_root=False) is None

    def test_root_resolution_ignores_overlay(self):
        self.cont.register_mock(self.TestClass, SimpleNamespace(value=lambda: "mocked-value"))

        # the mock is not a class, so building it fails
        with pytest.raises(ResolutionError, match="Unable to resolve service"):
            self.cont.resolve(self.TestClass, use_overlay=True)

    def test_nested_resolution_without_overlay_tries_to_construct_mock(self):
        self.cont.register_mock(self.TestClass, SimpleNamespace(value=lambda: "mocked-value"))

        with pytest.raises(ResolutionError):
            self.cont.resolve(self.TestClass, use_overlay=False, is_root=False)

    def test_mock_overrides_previous_registration(self):
        self.cont.register(self.TestClass)
        assert self.cont.resolve(self.TestClass).value() == "real-value"

        mock = SimpleNamespace(value=lambda: "mocked-value")
        self.cont.register_mock(self.TestClass, mock)

        assert self.cont.resolve(self.TestClass, use_overlay=True, is_root=False).value() == "mocked-value"

    def test_overlay_does_not_apply_to_unmocked_classes(self):
        self.cont.register(self.TestClass)
        result = self.cont.resolve(self.TestClass, use_overlay=True, is_root=False)
        assert isinstance(result, self.TestClass)


class TestMockedDependencies(unittest.TestCase):
    cont: Container

    def setUp(self):
        self.cont = Container()

    def test_owner_receives_identical_mock(self):
        env = Token("app-env")

        class DependencyClass:
            DEPS = [env]

            def __init__(self, variables):
                self.variables = variables

            def value(self) -> str:
                return f"real-{self.variables['env']}"

        class TestClass:
            DEPS = [DependencyClass]

            def __init__(self, dep):
                self.dep = dep

            def value(self) -> str:
                return self.dep.value()

        mock = SimpleNamespace(value=lambda: "mocked-dependency")
        self.cont.register(env, {"env": "prod"})
        self.cont.register_mock(DependencyClass, mock)
        self.cont.register(TestClass)

        instance = self.cont.resolve(TestClass, use_overlay=True)

        assert instance.dep is mock
        assert instance.value() == "mocked-dependency"

    def test_overlay_applies_at_every_depth(self):
        class Database:
            DEPS = []

            def query(self) -> str:
                return "real-query"

        class Repository:
            DEPS = [Database]

            def __init__(self, db):
                self.db = db

        class Service:
            DEPS = [Repository]

            def __init__(self, repo):
                self.repo = repo

        db = MagicMock()
        db.query.return_value = "mocked-query"
        self.cont.register_mock(Database, db)
        self.cont.register(Service)

        service = self.cont.resolve(Service, use_overlay=True)

        assert service.repo.db.query() == "mocked-query"
        db.query.assert_called_once_with()

    def test_spy_mock_records_calls(self):
        class LoggerService:
            DEPS = []

            def log(self, message: str) -> None:
                raise AssertionError(message)

        class Consumer:
            DEPS = [LoggerService]

            def __init__(self, logger):
                self.logger = logger

            def run(self) -> None:
                self.logger.log("test message")

        spy = MagicMock()
        self.cont.register_mock(LoggerService, spy)
        self.cont.register(Consumer)

        self.cont.resolve(Consumer, use_overlay=True).run()

        spy.log.assert_called_once_with("test message")
