"""Shared keyword and TLD lists used by the component analyzers."""

from __future__ import annotations

SUSPICIOUS_TLDS = (".tk", ".ml", ".ga", ".cf", ".gq", ".xyz", ".top", ".club")

SUBDOMAIN_KEYWORDS = (
    "secure",
    "login",
    "verify",
    "account",
    "update",
    "confirm",
    "banking",
    "wallet",
    "authentication",
    "signin",
    "password",
    "security",
    "validation",
    "support",
    "help",
    "customer",
    "service",
)

PATH_KEYWORDS = (
    "verify",
    "confirm",
    "update",
    "secure",
    "account",
    "signin",
    "login",
    "password",
    "reset",
)

REDIRECT_PARAMS = ("redirect", "return", "goto", "url", "link", "next")

PHISHING_KEYWORDS = (
    "verify",
    "secure",
    "account",
    "update",
    "login",
    "signin",
    "confirm",
    "suspended",
    "locked",
)

FINANCIAL_KEYWORDS = (
    "bank",
    "banking",
    "pay",
    "payment",
    "wallet",
    "credit",
    "finance",
    "financial",
    "visa",
    "mastercard",
    "paypal",
    "transfer",
    "money",
    "cash",
    "atm",
    "transaction",
)

# Flags that describe an absence rather than a finding.
NEUTRAL_FLAGS = frozenset(
    {
        "no_subdomain",
        "root_path",
        "no_query_params",
        "known_legitimate_domain",
        "private_ip_detected",
        "localhost_detected",
    }
)


def has_suspicious_tld(hostname: str) -> bool:
    host = (hostname or "").lower()
    return any(host.endswith(tld) for tld in SUSPICIOUS_TLDS)
