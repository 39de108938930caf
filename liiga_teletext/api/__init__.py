"""Liiga API access: URLs, date policy, HTTP client and fetch orchestration."""
