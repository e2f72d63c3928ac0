"""External collaborators: the AI text service and domain availability."""

from namekit.adapters.ai import (
    CreativeName,
    NameAI,
    AnthropicNameAI,
    LocalNameAI,
    get_name_ai,
)
from namekit.adapters.domains import (
    DomainChecker,
    DnsDomainChecker,
    suggest_domains,
    get_domain_checker,
    check_domains,
)

__all__ = [
    'CreativeName',
    'NameAI',
    'AnthropicNameAI',
    'LocalNameAI',
    'get_name_ai',
    'DomainChecker',
    'DnsDomainChecker',
    'suggest_domains',
    'get_domain_checker',
    'check_domains',
]
