"""
VM16 Command-Line Interface
===========================

This package provides the command-line tools of the VM16 toolchain:

- **vm16asm**: VM16 assembler

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["vm16asm"]
