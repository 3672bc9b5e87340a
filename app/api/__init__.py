"""
==============================================================================
API Package
==============================================================================

REST routers and the media endpoint.

==============================================================================
"""
