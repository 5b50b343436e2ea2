"""Infra layer utilities."""

from .ua_pool import DEFAULT_USER_AGENT, UserAgentPool

__all__ = ["DEFAULT_USER_AGENT", "UserAgentPool"]
