"""
Assertions about what an action sends over UDP.

Every assertion takes a failure recorder `t` (anything with `error` and
`fatal`, see feedback.Recorder), a CaptureSession, the pattern(s) and a
zero-argument action. The action runs once, while the session's address
is being listened on, and the first datagram it produces is checked.

Mismatches go to t.error() and the test continues; a listener that cannot
be set up goes to t.fatal().
"""
from collections import namedtuple

from .feedback import caller_location, make_report
from .udp import SetupError, capture

MatchResult = namedtuple('MatchResult', ['got', 'equals', 'contains'])


def get_message(t, session, action):
    try:
        return capture(session, action)
    except SetupError as e:
        t.fatal(str(e))
        raise


def get(t, session, match, action):
    """Capture once and compare the message against `match`."""
    got = get_message(t, session, action)
    return MatchResult(got, got == match, match in got)


def missing(got, expected):
    return [s for s in expected if s not in got]


def present(got, unexpected):
    return [s for s in unexpected if s in got]


def should_receive_only(t, session, expected, action):
    """Fail unless the action sends exactly `expected`."""
    where = caller_location()
    got, equals, _ = get(t, session, expected, action)
    if not equals:
        t.error(make_report(where, [f"Expected: {expected!r}"], got))


def should_not_receive_only(t, session, not_expected, action):
    """Fail if the action sends exactly `not_expected`."""
    where = caller_location()
    _, equals, _ = get(t, session, not_expected, action)
    if equals:
        t.error(make_report(where, [f"Expected not to get: {not_expected!r}"]))


def should_receive(t, session, expected, action):
    """Fail unless the message sent contains `expected`."""
    where = caller_location()
    got, _, contains = get(t, session, expected, action)
    if not contains:
        t.error(make_report(where, [f"Expected to find: {expected!r}"], got))


def should_not_receive(t, session, unexpected, action):
    """Fail if the message sent contains `unexpected`."""
    where = caller_location()
    got, _, contains = get(t, session, unexpected, action)
    if contains:
        t.error(make_report(where, [f"Expected not to find: {unexpected!r}"], got))


def should_receive_all(t, session, expected, action):
    """Fail unless every string in `expected` is in the message."""
    should_receive_all_and_not_receive_any(
        t, session, expected, (), action, where=caller_location())


def should_not_receive_any(t, session, unexpected, action):
    """Fail if any string in `unexpected` is in the message."""
    should_receive_all_and_not_receive_any(
        t, session, (), unexpected, action, where=caller_location())


def should_receive_all_and_not_receive_any(t, session, expected, unexpected,
                                           action, where=None):
    """
    Capture once, then require every string in `expected` and none of the
    strings in `unexpected`. All violations go into a single report.
    """
    if where is None:
        where = caller_location()
    got = get_message(t, session, action)

    lines = [f"Expected to find: {s!r}" for s in missing(got, expected)]
    lines += [f"Expected not to find: {s!r}" for s in present(got, unexpected)]
    if lines:
        t.error(make_report(where, lines, got))
