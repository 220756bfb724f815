"""Cross-cutting infrastructure shared by the profile client.

Settings, structured logging, version metadata and observation context.
"""
