"""Profiles bounded context.

Resolves which tenant and subscription an account should operate against,
acquires the credentials proving that identity, and keeps the single
active context plus the registry of known cloud environments.
"""
