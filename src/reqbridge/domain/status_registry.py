"""Numeric status code -> reason phrase.

Standard codes (100-599) come from ``http.HTTPStatus``. Codes 600-1499 form an
application catalog of operational conditions, grouped in blocks of one
hundred. Every code inside 100-1499 resolves: uncatalogued codes fall back to
their block's generic phrase. Codes outside the range are defects.
"""
from __future__ import annotations

from collections.abc import Mapping
from http import HTTPStatus
from types import MappingProxyType

from reqbridge.domain.errors import UnknownStatusCode

MIN_CODE = 100
MAX_CODE = 1499

STANDARD_PHRASES: Mapping[int, str] = MappingProxyType({s.value: s.phrase for s in HTTPStatus})

EXTENDED_PHRASES: Mapping[int, str] = MappingProxyType({
    # 6xx rate limiting and quotas
    600: "Rate Limit Exceeded",
    601: "Daily Quota Exhausted",
    602: "Monthly Quota Exhausted",
    603: "Concurrent Request Limit Reached",
    604: "Burst Limit Exceeded",
    605: "Bandwidth Limit Exceeded",
    610: "Client Throttled",
    611: "Endpoint Throttled",
    # 7xx account state
    700: "Account Suspended",
    701: "Account Disabled",
    702: "Account Pending Verification",
    703: "Account Locked",
    704: "Account Closed",
    705: "Account Under Review",
    710: "Plan Downgraded",
    711: "Trial Expired",
    # 8xx authentication and session
    800: "Session Expired",
    801: "Session Revoked",
    802: "Invalid API Key",
    803: "API Key Expired",
    804: "Token Signature Invalid",
    805: "Multi-Factor Authentication Required",
    806: "Password Reset Required",
    810: "Device Not Recognized",
    # 9xx validation and input
    900: "Validation Failed",
    901: "Missing Required Field",
    902: "Field Format Invalid",
    903: "Value Out Of Range",
    904: "Duplicate Entry",
    905: "Unsupported Encoding",
    910: "Schema Version Mismatch",
    # 10xx data pipeline
    1000: "Pipeline Failed",
    1001: "Pipeline Stage Timed Out",
    1002: "Pipeline Input Rejected",
    1003: "Pipeline Output Invalid",
    1004: "Pipeline Backlog Full",
    1005: "Pipeline Cancelled",
    1010: "Transformation Error",
    1011: "Aggregation Error",
    # 11xx storage
    1100: "Storage Unavailable",
    1101: "Storage Quota Exceeded",
    1102: "Record Not Persisted",
    1103: "Record Conflict",
    1104: "Snapshot Unavailable",
    1110: "Retention Window Elapsed",
    # 12xx upstream integrations
    1200: "Upstream Unavailable",
    1201: "Upstream Timed Out",
    1202: "Upstream Rejected Request",
    1203: "Upstream Response Malformed",
    1204: "Upstream Credentials Invalid",
    1205: "Upstream Rate Limited",
    1210: "Webhook Delivery Failed",
    # 13xx billing
    1300: "Payment Declined",
    1301: "Payment Method Expired",
    1302: "Invoice Overdue",
    1303: "Insufficient Credits",
    1304: "Billing Address Required",
    1310: "Subscription Cancelled",
    # 14xx maintenance and system state
    1400: "Maintenance In Progress",
    1401: "Read-Only Mode",
    1402: "Feature Disabled",
    1403: "Region Unavailable",
    1404: "Deprecated Endpoint",
    1405: "Service Draining",
    1410: "Scheduled Shutdown",
})

# generic phrase and on-the-wire HTTP status per hundred-block
BLOCKS: Mapping[int, tuple[str, int]] = MappingProxyType({
    1: ("Informational", 200),
    2: ("Success", 200),
    3: ("Redirection", 300),
    4: ("Client Error", 400),
    5: ("Server Error", 500),
    6: ("Rate Limit Condition", 429),
    7: ("Account Condition", 403),
    8: ("Authentication Condition", 401),
    9: ("Validation Condition", 422),
    10: ("Pipeline Condition", 500),
    11: ("Storage Condition", 507),
    12: ("Upstream Condition", 502),
    13: ("Billing Condition", 402),
    14: ("Maintenance Condition", 503),
})


class StatusRegistry:
    def __init__(self, phrases: Mapping[int, str] | None = None) -> None:
        if phrases is None:
            phrases = {**STANDARD_PHRASES, **EXTENDED_PHRASES}
        self._phrases = MappingProxyType(dict(phrases))

    def _check(self, code: int) -> int:
        if isinstance(code, bool) or not isinstance(code, int) or not MIN_CODE <= code <= MAX_CODE:
            raise UnknownStatusCode(code)
        return code

    def phrase(self, code: int) -> str:
        code = self._check(code)
        if code in self._phrases:
            return self._phrases[code]
        return BLOCKS[code // 100][0]

    def is_catalogued(self, code: int) -> bool:
        return code in self._phrases

    def is_extended(self, code: int) -> bool:
        return self._check(code) >= 600

    def wire_status(self, code: int) -> int:
        """Status actually sent over HTTP; extended codes map to their block's."""
        code = self._check(code)
        if 200 <= code < 600:
            return code
        return BLOCKS[code // 100][1]

    def __contains__(self, code: object) -> bool:
        return isinstance(code, int) and not isinstance(code, bool) and MIN_CODE <= code <= MAX_CODE

    def __getitem__(self, code: int) -> str:
        return self.phrase(code)


default_registry = StatusRegistry()
