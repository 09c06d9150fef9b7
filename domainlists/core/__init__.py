"""Core modules: configuration, validation and list storage"""
from .config import ConfigManager
from .validator import DomainValidator, normalize_domain
from .allowlist import AllowlistFilter
from .lists import DomainLists, load_domains, save_domains, merge_results, prune, prune_file

__all__ = [
    'ConfigManager',
    'DomainValidator',
    'normalize_domain',
    'AllowlistFilter',
    'DomainLists',
    'load_domains',
    'save_domains',
    'merge_results',
    'prune',
    'prune_file'
]
