"""
Domain Lists - maintained working/inactive domain lists.

Public API:
    - DNSChecker: Bounded-concurrency DNS liveness checker
    - DomainValidator: Domain normalization and validation
    - DomainLists: Canonical list files
    - ConfigManager: Configuration with defaults
"""

from .core import AllowlistFilter, ConfigManager, DomainLists, DomainValidator, merge_results
from .resolution import DNSChecker, DNSResolver, check_domains

__all__ = [
    'AllowlistFilter',
    'ConfigManager',
    'DNSChecker',
    'DNSResolver',
    'DomainLists',
    'DomainValidator',
    'check_domains',
    'merge_results',
]

__version__ = '1.0.0'
