TEST_FILE = '''
import socket
from udpassert import should_receive, should_receive_only

def send(data):
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.sendto(data, ('127.0.0.1', 8127))
    sock.close()

def test_pass(udp_t, udp_session):
    should_receive_only(udp_t, udp_session, 'foo', lambda: send(b'foo'))

def test_fail(udp_t, udp_session):
    should_receive_only(udp_t, udp_session, 'foo', lambda: send(b'bar'))
    should_receive(udp_t, udp_session, 'baz', lambda: send(b'bar'))
    print('still running')
'''


def test_errors_fail_test(pytester):
    pytester.makepyfile(TEST_FILE)
    result = pytester.runpytest('--udp-address', '127.0.0.1:8127')
    result.assert_outcomes(passed=1, failed=1)
    result.stdout.fnmatch_lines([
        "*Expected: 'foo'*",
        "*Expected to find: 'baz'*",
        "*still running*",
    ])


def test_settings_file(pytester):
    pytester.makeini('[pytest]\nudp_settings = udp.yaml\n')
    pytester.makefile('.yaml', udp='udp:\n  address: "127.0.0.1:8127"\n')
    pytester.makepyfile(TEST_FILE)
    result = pytester.runpytest()
    result.assert_outcomes(passed=1, failed=1)


def test_address_option_overrides_settings_file(pytester):
    # the file points at a port nobody sends to
    pytester.makeini('[pytest]\nudp_settings = udp.yaml\n')
    pytester.makefile('.yaml', udp='udp:\n  address: "127.0.0.1:8128"\n')
    pytester.makepyfile(TEST_FILE)
    result = pytester.runpytest('--udp-address', '127.0.0.1:8127')
    result.assert_outcomes(passed=1, failed=1)
    result.stdout.fnmatch_lines(["*Expected: 'foo'*", "*But got: 'bar'*"])


def test_recorded_errors_kept_when_body_raises(pytester):
    pytester.makepyfile(TEST_FILE.split("def test_pass")[0] + '''
def test_raises(udp_t, udp_session):
    should_receive_only(udp_t, udp_session, 'foo', lambda: send(b'bar'))
    raise ValueError('body broke')
''')
    result = pytester.runpytest('--udp-address', '127.0.0.1:8127')
    result.assert_outcomes(failed=1)
    result.stdout.fnmatch_lines([
        "*ValueError: body broke*",
        "*Captured udp assertions call*",
        "*Expected: 'foo'*",
    ])
