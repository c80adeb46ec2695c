import pytest
from hypothesis import HealthCheck, settings

from attestation import AttestationReport, collect_git_info, configure_logging, outcome_from_report
from audit import InteractionTracer
from builders import CartBuilder, traced_calculate

# Tracing fixtures are function-scoped and reused across generated examples.
settings.register_profile("pricing", suppress_health_check=[HealthCheck.function_scoped_fixture])
settings.load_profile("pricing")

tracer_key = pytest.StashKey[InteractionTracer]()
outcomes_key = pytest.StashKey[list]()


def pytest_addoption(parser):
    parser.addoption(
        "--attestation-dir",
        default=None,
        help="Write Markdown/HTML attestation reports for this run into the given directory.",
    )


def pytest_configure(config):
    config.stash[tracer_key] = InteractionTracer()
    config.stash[outcomes_key] = []


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    recorded = outcome_from_report(outcome.get_result())
    if recorded is not None:
        item.config.stash[outcomes_key].append(recorded)


def pytest_sessionfinish(session):
    directory = session.config.getoption("--attestation-dir")
    if not directory:
        return
    configure_logging()
    report = AttestationReport(
        session.config.stash[outcomes_key],
        tracer=session.config.stash[tracer_key],
        git=collect_git_info(),
    )
    report.write_reports(directory)


@pytest.fixture
def tracer(request):
    return request.config.stash[tracer_key]


@pytest.fixture
def cart(request, tracer):
    """A fresh CartBuilder whose calculations are traced under this test's id."""
    return CartBuilder.new(tracer=tracer, trace_key=request.node.nodeid)


@pytest.fixture
def price(request, tracer):
    """calculate() that traces every generated case under this test's id."""
    return traced_calculate(tracer, request.node.nodeid)
