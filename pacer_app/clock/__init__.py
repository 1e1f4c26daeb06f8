"""
Session timing module.

Provides the interval clock that tracks elapsed workout time across pause,
resume and host suspension, and the periodic tick loop that samples it.
"""
