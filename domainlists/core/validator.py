"""
Domain validation and normalization utilities
"""

import re
from typing import Iterable, List, Optional


class DomainValidator:
    """Validates and normalizes domain names"""

    # Hostname pattern (labels may carry underscores, as ad/tracker hosts often do)
    DOMAIN_PATTERN = re.compile(
        r'^(\*\.)?'  # Optional wildcard
        r'([a-z0-9_]([a-z0-9_\-]{0,61}[a-z0-9_])?\.)*'  # Subdomains
        r'[a-z0-9_]([a-z0-9_\-]{0,61}[a-z0-9_])?'  # Domain
        r'\.([a-z]{2,63}|xn--[a-z0-9\-]{1,59})$'  # TLD
    )

    # hosts-file style sink prefixes: "0.0.0.0 ads.example.com"
    IP_PREFIX_PATTERN = re.compile(r'^(0\.0\.0\.0|127\.0\.0\.1)\s+')

    SCHEME_PATTERN = re.compile(r'^https?://', re.IGNORECASE)

    def normalize(self, domain: str) -> str:
        """
        Normalize a domain name

        Steps are repeated until nothing changes, so the result is a
        fixed point: normalize(normalize(x)) == normalize(x).

        Args:
            domain: Raw domain string

        Returns:
            Normalized domain (lowercase, no scheme/prefix/quotes/trailing punctuation)
        """
        if not domain:
            return ""

        previous = None
        while domain != previous:
            previous = domain
            domain = self._normalize_once(domain)

        return domain

    def _normalize_once(self, domain: str) -> str:
        domain = domain.strip().lower()

        # Remove sink IP prefix (hosts file format)
        domain = self.IP_PREFIX_PATTERN.sub('', domain)

        domain = domain.replace('"', '')
        domain = domain.rstrip(',').strip()

        # Remove http:// or https:// if present
        domain = self.SCHEME_PATTERN.sub('', domain)

        domain = domain.rstrip('/')

        # Extract just the host if there's a path
        if '/' in domain:
            domain = domain.split('/')[0]

        # Remove trailing dot (FQDN form)
        return domain.rstrip('.')

    def is_valid_domain(self, domain: str, allow_wildcard: bool = False) -> bool:
        """
        Check if a domain is valid

        Args:
            domain: Domain to validate (already normalized)
            allow_wildcard: Accept a leading "*." label

        Returns:
            True if valid, False otherwise
        """
        if not domain:
            return False

        if len(domain) > 253:
            return False

        if self.is_wildcard(domain) and not allow_wildcard:
            return False

        if not self.DOMAIN_PATTERN.match(domain):
            return False

        labels = domain.replace('*.', '').split('.')
        for label in labels:
            if len(label) > 63 or len(label) == 0:
                return False

        return True

    def is_wildcard(self, domain: str) -> bool:
        """Check if domain is a wildcard"""
        return domain.startswith('*.')

    def clean(self, domain: str) -> Optional[str]:
        """Normalize and validate in one step; None when the entry is not a hostname"""
        normalized = self.normalize(domain)
        if self.is_valid_domain(normalized):
            return normalized
        return None

    def clean_all(self, domains: Iterable[str]) -> List[str]:
        """Normalize, validate and de-duplicate, keeping first-seen order"""
        seen = set()
        result = []
        for raw in domains:
            domain = self.clean(raw)
            if domain and domain not in seen:
                seen.add(domain)
                result.append(domain)
        return result

    def is_subdomain_of(self, subdomain: str, apex: str) -> bool:
        """
        Check if subdomain belongs to apex domain

        Args:
            subdomain: Subdomain to check
            apex: Apex domain

        Returns:
            True if subdomain is under apex domain (or equal to it)
        """
        subdomain = self.normalize(subdomain).replace('*.', '')
        apex = self.normalize(apex).replace('*.', '')

        return subdomain == apex or subdomain.endswith('.' + apex)


_default_validator = DomainValidator()


def normalize_domain(domain: str) -> str:
    """Module-level shortcut for DomainValidator().normalize"""
    return _default_validator.normalize(domain)
