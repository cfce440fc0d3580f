"""IP/CIDR rules and address matching.

Rules come from a comma-separated user string such as
"192.168.1.0/24,10.0.0.1". Only IPv4 is supported, and only the first two
rules are used. Malformed rules and unparsable addresses never raise; they
simply never match.
"""

import ipaddress
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

MAX_RULES = 2

_ALL_ONES = 0xFFFFFFFF


class IpRule(BaseModel):
    """A single rule: either a literal IPv4 address or network/prefix"""

    model_config = ConfigDict(frozen=True)

    raw: str

    @property
    def is_cidr(self) -> bool:
        return "/" in self.raw

    @property
    def network(self) -> str | None:
        parts = self.raw.split("/")
        if len(parts) != 2:
            return None
        return parts[0]

    @property
    def prefix_length(self) -> int | None:
        """Prefix length in 0..32, or None when the CIDR is malformed"""
        parts = self.raw.split("/")
        if len(parts) != 2:
            return None
        digits = parts[1]
        if not (digits.isascii() and digits.isdigit()):
            return None
        prefix = int(digits)
        if prefix < 0 or prefix > 32:
            return None
        return prefix


class RuleSet(BaseModel):
    """Immutable, ordered set of at most MAX_RULES rules"""

    model_config = ConfigDict(frozen=True)

    rules: tuple[IpRule, ...] = ()

    def __len__(self) -> int:
        return len(self.rules)

    @property
    def is_empty(self) -> bool:
        return not self.rules

    def raw_rules(self) -> list[str]:
        return [rule.raw for rule in self.rules]


def parse_rules(raw: str | None) -> RuleSet:
    """Parse a comma-separated rule string.

    Segments are trimmed, empty segments dropped, and only the first
    MAX_RULES survivors are kept in input order.
    """
    if not raw or not raw.strip():
        return RuleSet()

    segments = [segment.strip() for segment in raw.split(",")]
    kept = [segment for segment in segments if segment][:MAX_RULES]
    return RuleSet(rules=tuple(IpRule(raw=segment) for segment in kept))


def ip_to_int(address: str) -> int:
    """Convert a dotted-quad IPv4 address to a big-endian unsigned int.

    Raises:
        ValueError: address is not a valid IPv4 literal
    """
    return int(ipaddress.IPv4Address(address))


def prefix_mask(prefix_length: int) -> int:
    # /0 must be a zero mask, not a shift by 32
    if prefix_length == 0:
        return 0
    return (_ALL_ONES << (32 - prefix_length)) & _ALL_ONES


def match_one(address: str, rule: IpRule | str) -> bool:
    """Check one observed address against one rule"""
    if isinstance(rule, str):
        rule = IpRule(raw=rule)

    try:
        address_int = ip_to_int(address)
    except ValueError:
        return False

    if not rule.is_cidr:
        return address == rule.raw

    prefix = rule.prefix_length
    if prefix is None or rule.network is None:
        return False

    try:
        network_int = ip_to_int(rule.network)
    except ValueError:
        return False

    mask = prefix_mask(prefix)
    return (address_int & mask) == (network_int & mask)


def matches(addresses: Iterable[str], rules: RuleSet) -> bool:
    """True if any address matches any rule"""
    if rules.is_empty:
        return False

    for address in addresses:
        for rule in rules.rules:
            if match_one(address, rule):
                return True

    return False
