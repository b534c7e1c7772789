import threading

from .settings import DEFAULT_BUFFER_SIZE, DEFAULT_TIMEOUT


class CaptureSession:
    """Holds the listen address and capture limits shared by a test suite."""

    def __init__(self, address=None, timeout=DEFAULT_TIMEOUT,
                 buffer_size=DEFAULT_BUFFER_SIZE):
        self.address = address
        self.timeout = timeout
        self.buffer_size = buffer_size
        # one listener at a time per session
        self.lock = threading.Lock()

    @classmethod
    def from_settings(cls, cfg):
        return cls(cfg['address'], cfg['timeout'], cfg['buffer_size'])

    def set_address(self, address):
        """Set the UDP address that will be listened on."""
        self.address = address

    def __repr__(self):
        return (f"CaptureSession(address={self.address!r}, "
                f"timeout={self.timeout!r}, buffer_size={self.buffer_size!r})")
