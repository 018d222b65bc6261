"""Pragmas, measurements and classical register definitions."""
from typing import Any, Dict, Mapping, Optional

import attrs
from attrs import frozen, field, validators

from .dtypes import SymbolicFloat
from .operation import (
    Involved,
    InvolvedQubits,
    PragmaOperation,
    MeasurementOperation,
    DefinitionOperation,
    qubit_field,
    parameter_field,
)


def _to_qubit_mapping(value: Optional[Mapping[Any, Any]]) -> Optional[Dict[int, int]]:
    # JSON round trips turn integer keys into strings
    if value is None:
        return None
    return {int(k): int(v) for k, v in value.items()}


@frozen
class PragmaGlobalPhase(PragmaOperation):
    """Global phase e^{i·phase} of the whole circuit."""
    phase: SymbolicFloat = parameter_field()

    def involved_qubits(self) -> InvolvedQubits:
        return Involved.NONE


@frozen
class PragmaSetNumberOfMeasurements(PragmaOperation):
    """Number of projective measurements used when sampling ``readout``."""
    number_measurements: int = field(converter=int, validator=validators.ge(0))
    readout: str = field(converter=str)

    def involved_qubits(self) -> InvolvedQubits:
        return Involved.NONE


@frozen
class PragmaRepeatedMeasurement(PragmaOperation):
    """Measure every qubit ``number_measurements`` times into ``readout``.

    ``qubit_mapping`` optionally routes qubit -> readout index; qubits absent
    from it keep their own index.
    """
    readout: str = field(converter=str)
    number_measurements: int = field(converter=int, validator=validators.ge(0))
    qubit_mapping: Optional[Dict[int, int]] = field(default=None, converter=_to_qubit_mapping, hash=False)

    def involved_qubits(self) -> InvolvedQubits:
        return Involved.ALL

    def _remap_global(self, mapping):
        if self.qubit_mapping is None:
            return self
        remapped = {mapping.get(qubit, qubit): index for qubit, index in self.qubit_mapping.items()}
        return attrs.evolve(self, qubit_mapping=remapped)


@frozen
class PragmaActiveReset(PragmaOperation):
    """Reset ``qubit`` to |0⟩."""
    qubit: int = qubit_field()


@frozen
class MeasureQubit(MeasurementOperation):
    """Measure ``qubit`` into entry ``readout_index`` of bit register ``readout``."""
    qubit: int = qubit_field()
    readout: str = field(converter=str)
    readout_index: int = field(converter=int, validator=validators.ge(0))


@frozen
class DefinitionBit(DefinitionOperation):
    name: str = field(converter=str)
    length: int = field(converter=int, validator=validators.ge(0))
    is_output: bool = field(converter=bool)


@frozen
class DefinitionFloat(DefinitionOperation):
    name: str = field(converter=str)
    length: int = field(converter=int, validator=validators.ge(0))
    is_output: bool = field(converter=bool)
