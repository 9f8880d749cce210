"""
Per-frame analysis modules: facial geometry, blink detection and engagement.
"""
