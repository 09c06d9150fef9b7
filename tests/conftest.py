import threading
import time

import pytest

from domainlists.core.config import ConfigManager
from domainlists.core.lists import DomainLists
from domainlists.resolution.dns_checker import DNSChecker


class SetResolver:
    """Mock resolver: active when the domain is in `alive`"""

    def __init__(self, alive=(), delay=0):
        self.alive = set(alive)
        self.delay = delay
        self.calls = []
        self._lock = threading.Lock()

    def __call__(self, domain):
        with self._lock:
            self.calls.append(domain)
        if self.delay:
            time.sleep(self.delay)
        return domain in self.alive


class CountingResolver:
    """Mock resolver with artificial delay that tracks probes in flight"""

    def __init__(self, delay=0.01, result=True):
        self.delay = delay
        self.result = result
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def __call__(self, domain):
        with self._lock:
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            time.sleep(self.delay)
            return self.result
        finally:
            with self._lock:
                self.in_flight -= 1


def make_checker(alive=(), concurrency=4):
    return DNSChecker({'concurrency': concurrency, 'progress_every': 0}, resolver=SetResolver(alive))


@pytest.fixture
def config(tmp_path):
    config = ConfigManager(quiet=True)
    config.set('files', 'base_dir', str(tmp_path))
    return config


@pytest.fixture
def lists(config):
    return DomainLists(config.get_files_config())


def write_lines(path, lines):
    path.write_text(''.join(f"{line}\n" for line in lines), encoding='utf-8')
    return path


def read_lines(path):
    return [line for line in path.read_text(encoding='utf-8').splitlines() if line]
