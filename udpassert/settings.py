from datetime import datetime

import yaml

# Loopback by default; the helper is meant for local test traffic
DEFAULT_ADDRESS     = "127.0.0.1:8126"
DEFAULT_TIMEOUT     = 0.1      # seconds to wait for a datagram after the action returns
DEFAULT_BUFFER_SIZE = 32 * 1024  # longer datagrams are truncated

DEFAULTS = {
    'address': DEFAULT_ADDRESS,
    'timeout': DEFAULT_TIMEOUT,
    'buffer_size': DEFAULT_BUFFER_SIZE,
}

def log(role: str, msg: str) -> None:
    """Simple timestamped log."""
    print(f"[{datetime.now().strftime('%H:%M:%S')}] [{role}] {msg}", flush=True)

def load_settings(path=None):
    """
    Read the `udp:` section of a YAML settings file and merge it over
    DEFAULTS. With no path, the defaults are returned.

    Example file:

        udp:
          address: "127.0.0.1:8126"
          timeout: 0.05
          buffer_size: 1024
    """
    cfg = dict(DEFAULTS)
    if path is None:
        return cfg

    with open(path) as f:
        doc = yaml.safe_load(f) or {}

    section = doc.get('udp') or {}
    if not isinstance(section, dict):
        raise ValueError(f"{path}: 'udp' must be a mapping")

    unknown = set(section) - set(DEFAULTS)
    if unknown:
        raise ValueError(f"{path}: unknown udp settings {sorted(unknown)}")

    cfg.update(section)
    cfg['timeout'] = float(cfg['timeout'])
    cfg['buffer_size'] = int(cfg['buffer_size'])
    if cfg['timeout'] < 0:
        raise ValueError(f"{path}: timeout must not be negative")
    if cfg['buffer_size'] <= 0:
        raise ValueError(f"{path}: buffer_size must be positive")
    return cfg
