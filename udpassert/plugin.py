"""pytest plugin: `udp_session` and `udp_t` fixtures."""
import pytest

from .feedback import Recorder
from .session import CaptureSession
from .settings import load_settings


def pytest_addoption(parser):
    parser.addini('udp_settings', 'YAML file with the udp capture settings')
    parser.addoption('--udp-address', default=None,
                     help='host:port to listen on for udp assertions')


@pytest.fixture(scope='session')
def udp_session(pytestconfig):
    path = pytestconfig.getini('udp_settings') or None
    if path:
        path = pytestconfig.rootpath / path
    session = CaptureSession.from_settings(load_settings(path))
    address = pytestconfig.getoption('--udp-address')
    if address:
        session.set_address(address)
    return session


@pytest.fixture
def udp_t():
    """Recorder whose errors fail the test once its body has run."""
    return Recorder()


@pytest.hookimpl(wrapper=True)
def pytest_runtest_call(item):
    recorder = getattr(item, 'funcargs', {}).get('udp_t')
    try:
        res = yield
    except BaseException:
        # the body failed first; keep what was recorded before it did
        if recorder is not None and recorder.failed:
            item.add_report_section('call', 'udp assertions', "\n".join(recorder.errors))
        raise
    if recorder is not None:
        recorder.check()
    return res
