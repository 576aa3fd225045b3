"""
NS_Libs - Nano Studio Library Modules

This package contains core functionality for the Nano Studio project,
organized into specialized sub-packages:

- MaskingLib: Pointer-to-pixel mapping, mask painting and export
- GenerationLib: Generation settings, request assembly and response parsing
- StudioLib: Configuration, editing session state and result export
"""

__version__ = "0.1.0"
