# src/diggeo/modules/dns_resolve.py
import ipaddress
from typing import List, Optional

import dns.exception
import dns.resolver

from diggeo.errors import ResolutionError
from diggeo.utils.logger_manager import get_logger

logger = get_logger()


class DomainResolver:
    """
    Forward lookups through dnspython, which reads the system resolver config
    (/etc/resolv.conf). A records come first, then AAAA, duplicates dropped.
    """

    def __init__(self, resolver: Optional[dns.resolver.Resolver] = None, lifetime: float = 10.0):
        self.lifetime = lifetime
        self._resolver = resolver

    def _system_resolver(self, domain: str):
        if self._resolver is None:
            try:
                resolver = dns.resolver.Resolver()
            except dns.exception.DNSException as e:
                raise ResolutionError(domain, f"no usable resolver configuration: {e}")
            resolver.lifetime = self.lifetime
            self._resolver = resolver
        return self._resolver

    def resolve(self, domain: str, ipv4_only: bool = False) -> List[str]:
        domain = domain.strip()
        if not domain:
            raise ResolutionError(domain, "empty domain name")

        # an address passed to --dig resolves to itself
        try:
            return [str(ipaddress.ip_address(domain))]
        except ValueError:
            pass

        resolver = self._system_resolver(domain)
        rdtypes = ["A"] if ipv4_only else ["A", "AAAA"]
        addresses: List[str] = []
        reason = "no address records"

        for rdtype in rdtypes:
            try:
                answer = resolver.resolve(domain, rdtype)
            except dns.resolver.NXDOMAIN:
                raise ResolutionError(domain, "domain does not exist")
            except dns.resolver.NoAnswer:
                logger.debug(f"[DNS] {domain} has no {rdtype} records")
                continue
            except dns.exception.Timeout:
                reason = f"{rdtype} lookup timed out"
                logger.warning(f"[DNS] {domain}: {reason}")
                continue
            except dns.exception.DNSException as e:
                reason = f"{rdtype} lookup failed: {e}"
                logger.warning(f"[DNS] {domain}: {reason}")
                continue

            for rr in answer:
                addr = rr.to_text()
                if addr not in addresses:
                    addresses.append(addr)
            logger.debug(f"[DNS] {domain} {rdtype} -> {', '.join(addresses) or 'none'}")

        if not addresses:
            raise ResolutionError(domain, reason)
        return addresses

