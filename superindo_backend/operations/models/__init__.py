"""
PATH: operations/models/__init__.py

Operations models export surface.
"""

from .incoming import Incoming
from .invoice import Invoice
from .number_sequence import NumberSequence
from .production import Production

__all__ = [
    "Incoming",
    "Invoice",
    "NumberSequence",
    "Production",
]
