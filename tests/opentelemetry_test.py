import pytest
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import (
    InMemorySpanExporter,
)
from opentelemetry.trace import StatusCode

from errata.core.config import Config
from errata.core.exceptions import ErrataIOError
from errata.core.exceptions import ErrataSQLError
from errata.core.exceptions import UserAppExitError
from errata.utils.opentelemetry import ERROR_CLASS_ATTRIBUTE
from errata.utils.opentelemetry import SQL_STATE_ATTRIBUTE
from errata.utils.opentelemetry import get_tracer
from errata.utils.opentelemetry import record_error


@pytest.fixture
def exporter():
    return InMemorySpanExporter()


@pytest.fixture
def tracer(exporter):
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    return provider.get_tracer("errata.tests")


@pytest.mark.integration
class TestRecordError:
    def test_classified_error(self, tracer, exporter):
        error = ErrataSQLError("TWO_PARAMETERS", ["Goku", "Frieza"])
        with tracer.start_as_current_span("query") as span:
            record_error(error, span)
        (finished,) = exporter.get_finished_spans()
        assert finished.attributes[ERROR_CLASS_ATTRIBUTE] == "TWO_PARAMETERS"
        assert finished.attributes[SQL_STATE_ATTRIBUTE] == "42000"
        assert finished.status.status_code is StatusCode.ERROR
        (event,) = finished.events
        assert event.name == "exception"
        assert event.attributes["exception.message"] == "Goku fought Frieza"
        assert event.attributes[ERROR_CLASS_ATTRIBUTE] == "TWO_PARAMETERS"

    def test_current_span(self, tracer, exporter):
        error = ErrataIOError("STATELESS", ["disk"])
        with tracer.start_as_current_span("write"):
            record_error(error)
        (finished,) = exporter.get_finished_spans()
        assert finished.attributes[ERROR_CLASS_ATTRIBUTE] == "STATELESS"
        assert SQL_STATE_ATTRIBUTE not in finished.attributes

    @pytest.mark.parametrize(
        "error",
        [
            ErrataIOError.from_message("disk full"),
            UserAppExitError(127),
            ValueError("plain"),
        ],
    )
    def test_unclassified_error(self, tracer, exporter, error):
        with tracer.start_as_current_span("work") as span:
            record_error(error, span)
        (finished,) = exporter.get_finished_spans()
        assert ERROR_CLASS_ATTRIBUTE not in finished.attributes
        assert SQL_STATE_ATTRIBUTE not in finished.attributes
        assert finished.status.status_code is StatusCode.ERROR
        assert finished.events[0].name == "exception"


@pytest.mark.integration
def test_get_tracer():
    tracer = get_tracer(Config(), name="errata.tests")
    assert isinstance(tracer, trace.Tracer)
