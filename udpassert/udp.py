import asyncio
import inspect
import threading
from concurrent import futures

from .settings import log


class SetupError(Exception):
    """The listener could not be set up, so nothing can be asserted."""


def parse_address(address):
    """
    Split a `host:port` string into a (host, port) tuple for binding.

    An empty host (":8126") listens on every IPv4 interface. IPv6 hosts
    must be bracketed ("[::1]:8126").
    """
    if not address:
        raise SetupError("no UDP address configured")

    host, sep, port = address.rpartition(':')
    if not sep:
        raise SetupError(f"missing port in address {address!r}")
    if host.startswith('[') and host.endswith(']'):
        host = host[1:-1]
    elif ':' in host:
        raise SetupError(f"IPv6 host must be bracketed in {address!r}")

    try:
        port = int(port)
    except ValueError:
        raise SetupError(f"invalid port in address {address!r}") from None
    if not 0 <= port <= 65535:
        raise SetupError(f"port out of range in address {address!r}")

    return host or '0.0.0.0', port


class UDPListener:
    """
    One-shot asyncio UDP listener.

    Use as an async context manager: the socket is bound on enter and
    closed on exit, whatever happens in between. Only the first datagram
    is kept; `message` resolves with its text.
    """

    def __init__(self, host, port, buffer_size):
        self.host = host
        self.port = port
        self.buffer_size = buffer_size
        self.transport = None
        self.message = None

    class Proto(asyncio.DatagramProtocol):
        def __init__(self, result, buffer_size):
            self.result = result
            self.buffer_size = buffer_size

        def datagram_received(self, data, addr):
            if self.result.done():
                return  # only the first datagram counts
            text = data[:self.buffer_size].decode('utf-8', errors='replace')
            self.result.set_result(text)

    async def __aenter__(self):
        loop = asyncio.get_running_loop()
        self.message = loop.create_future()
        try:
            self.transport, _ = await loop.create_datagram_endpoint(
                lambda: UDPListener.Proto(self.message, self.buffer_size),
                local_addr=(self.host, self.port)
            )
        except OSError as e:
            raise SetupError(f"cannot listen on {self.host}:{self.port}: {e}") from e
        log("UDP", f"listening on {self.host}:{self.port}")
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.transport.close()
        if not self.message.done():
            self.message.cancel()
        log("UDP", f"closed {self.host}:{self.port}")
        return False

    async def receive(self, timeout):
        """Wait up to `timeout` seconds for the first datagram; "" if none."""
        try:
            return await asyncio.wait_for(asyncio.shield(self.message), timeout)
        except asyncio.TimeoutError:
            return ""


class ListenerThread:
    """
    Runs a UDPListener on a private event loop in a worker thread, so the
    caller's thread stays free for the action whether or not it already
    runs an event loop.

    Entering binds the address (SetupError surfaces here). finish() tells
    the worker the action is done and returns a concurrent future with the
    captured text. Exiting closes the listener.
    """

    def __init__(self, host, port, buffer_size, timeout):
        self.host = host
        self.port = port
        self.buffer_size = buffer_size
        self.timeout = timeout
        self.bound = futures.Future()
        self.finished = threading.Event()
        self.aborted = False
        self.pool = futures.ThreadPoolExecutor(max_workers=1)
        self.result = None

    async def listen(self):
        async with UDPListener(self.host, self.port, self.buffer_size) as listener:
            self.bound.set_result(None)
            await asyncio.get_running_loop().run_in_executor(None, self.finished.wait)
            if self.aborted:
                return ""
            return await listener.receive(self.timeout)

    def __enter__(self):
        self.result = self.pool.submit(asyncio.run, self.listen())
        futures.wait([self.bound, self.result], return_when=futures.FIRST_COMPLETED)
        if not self.bound.done():
            try:
                self.result.result()  # raises the bind error
            finally:
                self.pool.shutdown()
        return self

    def finish(self):
        self.finished.set()
        return self.result

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None:
            self.aborted = True
        self.finished.set()
        self.pool.shutdown()
        return False


def _report(got, timeout):
    if got:
        log("UDP", f"captured {len(got)} chars")
    else:
        log("UDP", f"nothing received within {timeout}s")
    return got


async def capture_async(session, action, timeout=None):
    """
    Bind the session's address, run `action` and return the text of the
    first datagram received, or "" if none arrives within the timeout.

    `action` takes no arguments. If it returns an awaitable, that is
    awaited. The timeout window starts once the action has returned, so
    a slow action cannot eat into it; a datagram sent while the action is
    still running is kept and counts as received.
    """
    if timeout is None:
        timeout = session.timeout
    host, port = parse_address(session.address)

    with ListenerThread(host, port, session.buffer_size, timeout) as listener:
        result = action()
        if inspect.isawaitable(result):
            await result
        got = await asyncio.wrap_future(listener.finish())
    return _report(got, timeout)


def capture(session, action, timeout=None):
    """
    Blocking version of capture_async, with the same timeout window.

    The listener runs on its own thread, so this works from plain tests,
    from async tests and with actions that start their own event loop.
    A coroutine returned by the action is run with asyncio.run(), which
    needs a thread with no running loop; inside one, use capture_async.
    Captures through one session are serialized.
    """
    if timeout is None:
        timeout = session.timeout
    host, port = parse_address(session.address)

    with session.lock:
        with ListenerThread(host, port, session.buffer_size, timeout) as listener:
            result = action()
            if inspect.iscoroutine(result):
                asyncio.run(result)
            got = listener.finish().result()
    return _report(got, timeout)
