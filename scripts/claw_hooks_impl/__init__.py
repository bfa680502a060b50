"""claw-hooks: allow/block decisions and side-effect hooks for coding agents."""

__version__ = "0.1.0"
