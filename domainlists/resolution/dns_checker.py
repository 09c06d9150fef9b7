"""
DNS Liveness Checker
Classifies domains as active/inactive by DNS resolution,
with a fixed cap on the number of outstanding probes.
"""

import queue
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple

import dns.exception
import dns.resolver
from termcolor import colored


# Worth another attempt within the same probe
TRANSIENT_ERRORS = (dns.exception.Timeout, dns.resolver.NoNameservers)


class DNSResolver:
    """
    Default probe: True when the domain has an address record.

    Record types are tried in order (A, then e.g. AAAA/CNAME) until one
    answers. NXDOMAIN ends the probe immediately. Every query is bounded
    by `timeout` seconds.
    """

    def __init__(self, config: Dict = None):
        config = config or {}
        self.timeout = float(config.get('timeout', 3.0))
        self.retries = max(0, int(config.get('retries', 1)))
        self.record_types = list(config.get('record_types') or ['A'])
        self.nameservers = list(config.get('nameservers') or [])
        self._local = threading.local()

    def _get_resolver(self) -> dns.resolver.Resolver:
        # One resolver per worker thread
        resolver = getattr(self._local, 'resolver', None)
        if resolver is None:
            if self.nameservers:
                resolver = dns.resolver.Resolver(configure=False)
                resolver.nameservers = self.nameservers
            else:
                resolver = dns.resolver.Resolver()
            resolver.timeout = self.timeout
            resolver.lifetime = self.timeout
            self._local.resolver = resolver
        return resolver

    def __call__(self, domain: str) -> bool:
        resolver = self._get_resolver()

        for record_type in self.record_types:
            for attempt in range(self.retries + 1):
                try:
                    resolver.resolve(domain, record_type)
                    return True
                except (dns.resolver.NXDOMAIN, dns.resolver.YXDOMAIN):
                    return False
                except dns.resolver.NoAnswer:
                    break
                except TRANSIENT_ERRORS:
                    continue
                except dns.exception.DNSException:
                    # Malformed name (label too long, empty label, ...)
                    return False

        return False


class DNSChecker:
    """
    Bounded-concurrency liveness checker.

    At most `concurrency` probes are outstanding at any time. Each domain
    moves pending -> active | inactive exactly once per run.
    """

    def __init__(self, config: Dict = None, resolver: Optional[Callable[[str], bool]] = None):
        """
        Initialize checker.

        Args:
            config: dns configuration dict with keys:
                - concurrency: Max outstanding probes (default 10)
                - timeout: Per-probe resolver timeout in seconds (default 3.0)
                - retries: Retries on transient resolver errors (default 1)
                - record_types: Record types tried in order (default ['A'])
                - nameservers: Nameserver IPs (default: system resolver)
                - progress_every: Progress line interval (default 100, 0 = off)
            resolver: Probe callable domain -> bool (default: DNSResolver)
        """
        config = config or {}
        self.concurrency = max(1, int(config.get('concurrency', 10)))
        self.progress_every = int(config.get('progress_every', 100))
        self.resolver = resolver or DNSResolver(config)
        self.stats = {'checked': 0, 'active': 0, 'inactive': 0, 'errors': 0}

    def check_domain(self, domain: str) -> bool:
        """Probe one domain; unexpected errors count as inactive"""
        try:
            return bool(self.resolver(domain))
        except Exception as e:
            self.stats['errors'] += 1
            print(colored(f"  [CHECK] Unexpected error for {domain}: {e}", "yellow"))
            return False

    def check(self, domains: Iterable[str]) -> Tuple[Set[str], Set[str]]:
        """
        Check domains with at most `concurrency` probes in flight.

        Falls back to sequential checking when worker threads are unavailable.
        If the pool cannot grow mid-batch, the workers already running finish
        what they were given and the rest of the batch is checked inline.

        Returns:
            Tuple of (active, inactive) disjoint sets covering every input domain
        """
        unique = list(dict.fromkeys(domains))
        active: Set[str] = set()
        inactive: Set[str] = set()

        if not unique:
            return active, inactive

        if self.concurrency == 1:
            return self.check_sequential(unique)

        try:
            executor = ThreadPoolExecutor(max_workers=self.concurrency)
        except (RuntimeError, OSError) as e:
            print(colored(f"[CHECK] Worker pool unavailable ({e}), checking sequentially", "yellow"))
            return self.check_sequential(unique)

        total = len(unique)
        results = queue.Queue()
        outstanding = 0
        orphan = None

        with executor:
            for domain in unique:
                if orphan is not None:
                    self._classify(domain, self.check_domain(domain), active, inactive, total)
                    continue

                # Throttle: free a slot before issuing the next probe
                while outstanding >= self.concurrency:
                    self._record(*results.get(), active, inactive, total)
                    outstanding -= 1

                try:
                    executor.submit(self._probe, domain, results)
                except RuntimeError as e:
                    # submit() queues the work before starting a thread, so a
                    # running worker may still pick this domain up
                    print(colored(f"  [CHECK] Worker spawn failed ({e}), checking the rest inline", "yellow"))
                    orphan = domain
                    continue

                outstanding += 1

            while outstanding:
                self._record(*results.get(), active, inactive, total)
                outstanding -= 1

        # All workers have exited here
        while not results.empty():
            self._record(*results.get_nowait(), active, inactive, total)

        if orphan is not None and orphan not in active and orphan not in inactive:
            self._classify(orphan, self.check_domain(orphan), active, inactive, total)

        return active, inactive

    def check_sequential(self, domains: Iterable[str]) -> Tuple[Set[str], Set[str]]:
        """Check domains one at a time with the same per-domain test"""
        unique = list(dict.fromkeys(domains))
        active: Set[str] = set()
        inactive: Set[str] = set()
        total = len(unique)

        for domain in unique:
            self._classify(domain, self.check_domain(domain), active, inactive, total)

        return active, inactive

    def _probe(self, domain: str, results: queue.Queue):
        # Runs on a worker thread; the outcome is handed back through `results`
        try:
            is_active = self.resolver(domain)
        except Exception as e:
            results.put((domain, False, e))
        else:
            results.put((domain, bool(is_active), None))

    def _record(self, domain: str, is_active: bool, error, active: Set[str], inactive: Set[str], total: int):
        if error is not None:
            self.stats['errors'] += 1
            print(colored(f"  [CHECK] Probe failed for {domain}: {error}", "yellow"))
        self._classify(domain, is_active, active, inactive, total)

    def _classify(self, domain: str, is_active: bool, active: Set[str], inactive: Set[str], total: int):
        # Only ever called from the coordinating thread
        if is_active:
            active.add(domain)
            self.stats['active'] += 1
        else:
            inactive.add(domain)
            self.stats['inactive'] += 1

        self.stats['checked'] += 1
        done = len(active) + len(inactive)
        if self.progress_every and done % self.progress_every == 0:
            print(f"  [CHECK] Processed {done}/{total} domains")


def check_domains(
    domains: List[str],
    concurrency: int = 10,
    resolver: Optional[Callable[[str], bool]] = None
) -> Tuple[Set[str], Set[str]]:
    """Convenience wrapper: check domains with a fresh DNSChecker"""
    checker = DNSChecker({'concurrency': concurrency, 'progress_every': 0}, resolver=resolver)
    return checker.check(domains)
