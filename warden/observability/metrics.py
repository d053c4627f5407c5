"""Prometheus metrics for Warden.

Counters for sign-in outcomes, audit writes and profile commits.
"""

from prometheus_client import Counter

LOGIN_ATTEMPTS = Counter(
    "warden_login_attempts_total",
    "Total number of sign-in attempts",
    labelnames=["outcome"],
)

AUDIT_WRITES = Counter(
    "warden_audit_writes_total",
    "Total number of audit records written",
    labelnames=["record_type"],
)

AUDIT_WRITE_FAILURES = Counter(
    "warden_audit_write_failures_total",
    "Total number of audit records that could not be written",
    labelnames=["record_type"],
)

PROFILE_CHANGES = Counter(
    "warden_profile_changes_total",
    "Total number of changed profile fields detected on submit",
    labelnames=["field"],
)

PROFILE_COMMITS = Counter(
    "warden_profile_commits_total",
    "Total number of profile update commits",
    labelnames=["status"],
)

REGISTRATIONS = Counter(
    "warden_registrations_total",
    "Total number of registration attempts",
    labelnames=["outcome"],
)
