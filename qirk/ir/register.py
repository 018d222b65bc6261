"""
Measurement overlay grouping circuits for statistical evaluation.

A ``ClassicalRegister`` holds an optional constant circuit, executed before
each measurement circuit, and an ordered tuple of measurement circuits.
"""
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

import attrs
from attrs import frozen, field

from .dtypes import as_resolver
from .quantum import Circuit
from .utilities import SubstitutionError
from ..util.log import get_logger
logger = get_logger(__name__)


def _to_circuits(circuits: Sequence[Circuit]) -> Tuple[Circuit, ...]:
    # circuits are mutable, the register keeps its own copies
    copies = []
    for circuit in circuits:
        if not isinstance(circuit, Circuit):
            raise TypeError(f"Measurement circuits must be Circuit instances, got {type(circuit)}")
        copies.append(Circuit(circuit.operations))
    return tuple(copies)


def _to_constant(circuit: Optional[Circuit]) -> Optional[Circuit]:
    if circuit is None:
        return None
    if not isinstance(circuit, Circuit):
        raise TypeError(f"constant_circuit must be a Circuit or None, got {type(circuit)}")
    return Circuit(circuit.operations)


@frozen
class ClassicalRegister:
    constant_circuit: Optional[Circuit] = field(default=None, converter=_to_constant)
    circuits: Tuple[Circuit, ...] = field(factory=tuple, converter=_to_circuits)

    # holds mutable circuits
    __hash__ = None

    def substitute_parameters(self, resolver) -> "ClassicalRegister":
        """Substitute the constant circuit and every measurement circuit.

        Raises:
            SubstitutionError: with ``location`` set to ``"constant_circuit"``
                or ``"circuits[i]"`` for the first circuit that fails.
        """
        resolver = as_resolver(resolver)
        constant = None
        if self.constant_circuit is not None:
            constant = self._substitute(self.constant_circuit, resolver, "constant_circuit")
        circuits = [
            self._substitute(circuit, resolver, f"circuits[{i}]")
            for i, circuit in enumerate(self.circuits)
        ]
        return attrs.evolve(self, constant_circuit=constant, circuits=circuits)

    @staticmethod
    def _substitute(circuit: Circuit, resolver, location: str) -> Circuit:
        try:
            return circuit.substitute_parameters(resolver)
        except SubstitutionError as exc:
            logger.debug(f"Substitution failed in {location}: {exc}")
            raise SubstitutionError(exc.symbol, location=location) from exc

    def to_dict(self) -> Dict[str, Any]:
        return {
            "constant_circuit": None if self.constant_circuit is None else self.constant_circuit.to_dict(),
            "circuits": [circuit.to_dict() for circuit in self.circuits],
        }

    @classmethod
    def from_dict(cls, blob: Mapping[str, Any]) -> "ClassicalRegister":
        constant = blob.get("constant_circuit")
        return cls(
            constant_circuit=None if constant is None else Circuit.from_dict(constant),
            circuits=[Circuit.from_dict(c) for c in blob.get("circuits", [])],
        )
