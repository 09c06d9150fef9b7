"""
Allowlist Filter
Domains on the allowlist are never checked and never written to either list.
"""

from typing import Iterable, List, Tuple

from .validator import DomainValidator


class AllowlistFilter:
    """Filters domains against allowlist entries (exact or *.wildcard)"""

    def __init__(self, entries: Iterable[str] = ()):
        self.validator = DomainValidator()
        self.exact = set()
        self.wildcards = []

        for entry in entries:
            entry = self.validator.normalize(entry)
            if not self.validator.is_valid_domain(entry, allow_wildcard=True):
                continue
            if self.validator.is_wildcard(entry):
                self.wildcards.append(entry)
            else:
                self.exact.add(entry)

    def __len__(self) -> int:
        return len(self.exact) + len(self.wildcards)

    def is_allowed(self, domain: str) -> bool:
        """True when the domain is allowlisted"""
        domain = self.validator.normalize(domain)

        if domain in self.exact:
            return True

        # *.example.com matches example.com and any subdomain
        for pattern in self.wildcards:
            if self.validator.is_subdomain_of(domain, pattern):
                return True

        return False

    def filter(self, domains: List[str]) -> Tuple[List[str], List[str]]:
        """Split into (to_check, allowlisted)"""
        to_check = []
        allowlisted = []
        for domain in domains:
            if self.is_allowed(domain):
                allowlisted.append(domain)
            else:
                to_check.append(domain)
        return to_check, allowlisted

    def filter_and_report(self, domains: List[str]) -> Tuple[List[str], List[str]]:
        to_check, allowlisted = self.filter(domains)
        if allowlisted:
            print(f"[ALLOWLIST] Skipped {len(allowlisted)} allowlisted domains")
            if len(allowlisted) <= 10:
                print(f"  Excluded: {', '.join(allowlisted)}")
            else:
                print(f"  Excluded (first 10): {', '.join(allowlisted[:10])}...")
        return to_check, allowlisted
