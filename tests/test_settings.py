import pytest
from udpassert.session import CaptureSession
from udpassert.settings import DEFAULTS, load_settings


def test_defaults():
    assert load_settings() == DEFAULTS


def test_load_settings(tmp_path):
    path = tmp_path / 'settings.yaml'
    path.write_text('udp:\n  address: ":9125"\n  timeout: 0.5\n')
    cfg = load_settings(path)
    assert cfg['address'] == ':9125'
    assert cfg['timeout'] == 0.5
    assert cfg['buffer_size'] == DEFAULTS['buffer_size']

    session = CaptureSession.from_settings(cfg)
    assert session.address == ':9125'
    assert session.timeout == 0.5


def test_empty_file(tmp_path):
    path = tmp_path / 'settings.yaml'
    path.write_text('')
    assert load_settings(path) == DEFAULTS


@pytest.mark.parametrize('body', [
    'udp:\n  port: 8126\n',
    'udp: [1, 2]\n',
    'udp:\n  timeout: -1\n',
    'udp:\n  buffer_size: 0\n',
])
def test_bad_settings(tmp_path, body):
    path = tmp_path / 'settings.yaml'
    path.write_text(body)
    with pytest.raises(ValueError):
        load_settings(path)


def test_set_address_overwrites():
    session = CaptureSession('127.0.0.1:1')
    session.set_address(':8126')
    assert session.address == ':8126'
    assert 'address=\':8126\'' in repr(session)
