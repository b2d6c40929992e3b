"""SRV record cache and routing decision engine."""

from .cache import SrvRecordCache, SrvSnapshot
from .engine import RoutingDecision, RoutingDecisionType, RoutingEngine
from .errors import SourceNotConfiguredError, SrvPortalError, UpstreamFetchError
from .overrides import VALID_REDIRECT_STATUSES, RedirectOverrideStore
from .patterns import DomainMatcher, DomainPatternSet, compile_domain_pattern
from .records import SrvRecord, parse_srv_name, parse_srv_record
from .services import ServiceKind, classify_service
from .store import RoutingStore

__all__ = [
    'SrvRecordCache',
    'SrvSnapshot',
    'RoutingDecision',
    'RoutingDecisionType',
    'RoutingEngine',
    'SourceNotConfiguredError',
    'SrvPortalError',
    'UpstreamFetchError',
    'VALID_REDIRECT_STATUSES',
    'RedirectOverrideStore',
    'DomainMatcher',
    'DomainPatternSet',
    'compile_domain_pattern',
    'SrvRecord',
    'parse_srv_name',
    'parse_srv_record',
    'ServiceKind',
    'classify_service',
    'RoutingStore',
]
