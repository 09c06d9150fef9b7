"""
Resolution & Filtering
Classifies domains as active/inactive by DNS and maintains the lists.
"""

from .dns_checker import DNSChecker, DNSResolver, check_domains
from .runner import run_update, run_retest, run_chunk, run_prune

__all__ = [
    'DNSChecker',
    'DNSResolver',
    'check_domains',
    'run_update',
    'run_retest',
    'run_chunk',
    'run_prune'
]
