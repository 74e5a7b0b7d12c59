from concurrent.futures import ThreadPoolExecutor

import pytest

from errata.core.config import _ALLOWED_LOG_LEVELS
from errata.core.config import _DEFAULT_LOG_DATEFMT
from errata.core.config import _DEFAULT_LOG_FMT
from errata.core.config import CatalogConfig
from errata.core.config import Config
from errata.core.config import ConsoleLoggerConfig
from errata.core.config import FileLoggerConfig
from errata.core.config import LoggerConfig
from errata.core.config import TelemetryConfig
from errata.core.config import config_property
from errata.core.error import ConfigValidationError as Error


@pytest.fixture
def factory():
    def _create_test_class(name="internal", default=None, **kwargs):
        class TestClass:
            pass

        _property = config_property(default, **kwargs)
        _property.__set_name__(TestClass, name)
        setattr(TestClass, name, _property)
        return TestClass

    return _create_test_class


@pytest.mark.unit
class TestConfigProperty:
    def test_init_with_defaults(self):
        _property = config_property(None)
        assert _property.default is None
        assert _property.frozen is False
        assert _property.description is None
        assert _property.allowed is None
        assert _property.check is None
        assert _property.between is None
        assert _property.property == ""
        assert _property.validate is False
        assert _property.locks == {}

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("path", "_path"),
            ("max_bytes", "_max_bytes"),
            ("encoding", "_encoding"),
        ],
    )
    def test_set_name_configures_name(self, name, expected, factory):
        TestClass = factory(name, "errata")
        descriptor = getattr(TestClass, name)
        assert descriptor.property == expected
        assert descriptor.default == "errata"

    def test_invalid_default(self):
        with pytest.raises(Error, match="got invalid value for 'level'"):

            class TestClass:
                level = config_property("TRACE", allowed=_ALLOWED_LOG_LEVELS)

    @pytest.mark.parametrize(
        "allowed, valid, invalid",
        [
            (("aang", "katara", "sokka"), "sokka", "zuko"),
            ((True, False), False, None),
            (("DEBUG", "INFO", "ERROR"), "INFO", "TRACE"),
        ],
    )
    def test_set_value_with_validation(self, allowed, valid, invalid, factory):
        TestClass = factory("avatar", valid, allowed=allowed)
        instance = TestClass()
        instance.avatar = valid
        assert instance.avatar == valid
        with pytest.raises(Error, match="not one of the allowed values"):
            instance.avatar = invalid

    def test_check_failure(self, factory):
        TestClass = factory("backups", 5, check=lambda x: x >= 0)
        instance = TestClass()
        with pytest.raises(Error, match="property validation failed"):
            instance.backups = -1

    def test_check_raising(self, factory):
        TestClass = factory("backups", 5, check=lambda x: x >= 0)
        instance = TestClass()
        with pytest.raises(Error, match="with message"):
            instance.backups = "five"

    @pytest.mark.parametrize(
        "between, valids, invalids",
        [
            ((1, 10), [1, 5, 10], [0, 11]),
            ((0.0, 1.0), [0.0, 0.5, 1.0], [-0.1, 1.1]),
        ],
    )
    def test_between(self, between, valids, invalids):
        _property = config_property(None, between=between)
        for value in valids:
            _property.__validate__(value)
        for value in invalids:
            with pytest.raises(Error, match="is not between"):
                _property.__validate__(value)

    def test_between_invalid_range(self):
        _property = config_property(None, between=("a", "z"))
        with pytest.raises(Error, match="must be a tuple of two numbers"):
            _property.__validate__(5)

    def test_frozen(self, factory):
        TestClass = factory("saiyan", "vegeta", frozen=True)
        instance = TestClass()
        assert instance.saiyan == "vegeta"
        with pytest.raises(Error, match="cannot modify frozen") as exc:
            instance.saiyan = "goku"
        assert "saiyan" in str(exc.value)

    def test_instances_are_independent(self, factory):
        TestClass = factory("level", "DEBUG", allowed=_ALLOWED_LOG_LEVELS)
        first, second = TestClass(), TestClass()
        first.level = "ERROR"
        assert second.level == "DEBUG"

    @pytest.mark.slow
    @pytest.mark.parametrize("threads, iterations", [(5, 100), (20, 500)])
    def test_thread_safety(self, threads, iterations, factory):
        members = ["Superman", "Batman", "Wonder Woman", "Flash"]
        TestClass = factory("member", "Superman", allowed=set(members))
        jla = TestClass()
        errors = []

        def worker(wid):
            for index in range(iterations):
                jla.member = members[index % len(members)]
                if jla.member not in members:
                    errors.append(f"Invalid value from worker {wid}")

        with ThreadPoolExecutor(max_workers=threads) as executor:
            for future in [executor.submit(worker, i) for i in range(threads)]:
                future.result()
        assert errors == []


@pytest.mark.integration
class TestCatalogConfig:
    def test_defaults(self):
        config = CatalogConfig()
        assert config.path is None
        assert config.encoding == "utf-8"

    def test_existing_path(self, tmp_path):
        path = tmp_path / "error-classes.json"
        path.write_text("{}", encoding="utf-8")
        config = CatalogConfig()
        config.path = str(path)
        assert config.path == str(path)
        config.path = None
        assert config.path is None

    @pytest.mark.parametrize("invalid", ["missing.json", ""])
    def test_missing_path(self, tmp_path, invalid):
        config = CatalogConfig()
        with pytest.raises(Error):
            config.path = str(tmp_path / invalid)

    def test_encoding_frozen(self):
        with pytest.raises(Error, match="cannot modify frozen property"):
            CatalogConfig().encoding = "latin-1"


@pytest.mark.integration
class TestLoggerConfig:
    def test_file_defaults(self):
        config = FileLoggerConfig()
        assert config.enable is False
        assert config.level == "INFO"
        assert config.fmt == _DEFAULT_LOG_FMT
        assert config.path == "logs"
        assert config.output == "errata.log"
        assert config.encoding == "utf-8"
        assert config.max_bytes == 10485760
        assert config.backups == 5

    def test_console_defaults(self):
        config = ConsoleLoggerConfig()
        assert config.enable is True
        assert config.level == "DEBUG"
        assert config.fmt == _DEFAULT_LOG_FMT
        assert config.colour is True

    def test_defaults(self):
        config = LoggerConfig()
        assert config.level == "DEBUG"
        assert config.datefmt == _DEFAULT_LOG_DATEFMT
        assert config.as_json is False
        assert isinstance(config.file, FileLoggerConfig)
        assert isinstance(config.tty, ConsoleLoggerConfig)

    @pytest.mark.parametrize("level", list(_ALLOWED_LOG_LEVELS))
    def test_level_allowed(self, level):
        config = FileLoggerConfig()
        config.level = level
        assert config.level == level

    @pytest.mark.parametrize("invalid", ["debug", "trace", "warn"])
    def test_level_invalids(self, invalid):
        with pytest.raises(Error):
            ConsoleLoggerConfig().level = invalid

    @pytest.mark.parametrize("invalid", ["", None, 42])
    def test_file_path_invalids(self, invalid):
        with pytest.raises(Error):
            FileLoggerConfig().path = invalid

    def test_file_path_not_created(self, tmp_path):
        config = FileLoggerConfig()
        config.path = str(tmp_path / "logs")
        assert not (tmp_path / "logs").exists()

    @pytest.mark.parametrize("invalid", ["true", 2, "yes"])
    def test_boolean_validation(self, invalid):
        with pytest.raises(Error):
            LoggerConfig().as_json = invalid


@pytest.mark.integration
class TestConfig:
    def test_defaults(self):
        config = Config()
        assert config.name == "errata"
        assert config.version == "18.10.2026"
        assert config.debug is False
        assert isinstance(config.catalog, CatalogConfig)
        assert isinstance(config.logger, LoggerConfig)
        assert isinstance(config.telemetry, TelemetryConfig)
        assert config.telemetry.enabled is False
        assert config.telemetry.name is None

    @pytest.mark.parametrize(
        "frozen, new",
        [
            ("name", "new_name"),
            ("version", "new_version"),
        ],
    )
    def test_frozen_properties(self, frozen, new):
        with pytest.raises(Error, match="cannot modify frozen property"):
            setattr(Config(), frozen, new)

    def test_debug(self):
        config = Config()
        config.debug = True
        assert config.debug is True
        assert Config().debug is False
