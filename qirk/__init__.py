# -*- coding: utf-8 -*-
"""Quantum circuit intermediate representation.

Operations (gates, pragmas, measurements, definitions), circuits, the
classical register overlay, and the passes that substitute parameters,
remap qubits, decompose multi-qubit gates and build unitary matrices.
"""

# Set up the logger.
from .util.log import get_logger
logger = get_logger(__name__)

__version__ = "0.1.0"
