#!/usr/bin/env python3
"""
Centralized constants for the security advisories check.

This module contains the magic numbers, strings, and configuration
defaults used throughout the codebase to avoid duplication.
"""

# Advisory service
ADVISORY_API_URL = "https://packagist.org/api/security-advisories/"
USER_AGENT = "security-advisories-check/1.0"
DEFAULT_HTTP_TIMEOUT_SECONDS = 30

# Retry behaviour
DEFAULT_RETRY_TIMES = 5
RETRY_SLEEP_SECONDS = 2.0
# Gateway statuses are treated as a temporary outage of the advisory service
GATEWAY_STATUS_CODES = frozenset({502, 503, 504})

# Result caching (0 minutes = disabled)
DEFAULT_CACHE_MINUTES = 0
CACHE_KEY_PREFIX = "security-advisories"

# Check identity and verdict messages
CHECK_NAME = "SecurityAdvisories"
CHECK_LABEL = "Security advisories"
MESSAGE_NO_ADVISORIES = "No security vulnerability advisories found"
MESSAGE_UNREACHABLE = "Advisory service could not be reached"
MESSAGE_ADVISORIES_FOUND = "Security advisories found for {packages}"

# Environment Variables
ENV_VARS = {
    "ADVISORY_API_URL": ADVISORY_API_URL,
    "ADVISORY_RETRY_TIMES": str(DEFAULT_RETRY_TIMES),
    "ADVISORY_CACHE_MINUTES": str(DEFAULT_CACHE_MINUTES),
    "ADVISORY_IGNORED_PACKAGES": "",
    "ADVISORY_HTTP_TIMEOUT": str(DEFAULT_HTTP_TIMEOUT_SECONDS),
}

# Status Messages
STATUS_ICONS = {
    "success": "✅",
    "error": "❌",
    "warning": "⚠️",
    "info": "ℹ️",
    "progress": "🔄",
    "cache": "📦",
    "network": "🌐",
}
