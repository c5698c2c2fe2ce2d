# =============================================================================
# setu_core/__init__.py
# Shiksha Setu offline-resilience core
# =============================================================================
"""
Offline-resilience core for the Shiksha Setu learning platform.

Subpackages:
- setu_core.offline: durable cache, pending queue, connectivity, sync
- setu_core.chat: Setu Saarthi tutor chat (streaming + offline answers)
- setu_core.config / setu_core.errors / setu_core.logging: shared plumbing
"""

__version__ = "1.0.0"
