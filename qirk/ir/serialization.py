"""Closed registry of operation variants, keyed by ``hqslang``."""
from typing import Any, Dict, Mapping, Type

from .operation import Operation
from .quantum_gates import (
    RotateX,
    RotateY,
    RotateZ,
    PhaseShiftState1,
    Hadamard,
    PauliX,
    PauliY,
    PauliZ,
    SGate,
    TGate,
    SqrtPauliX,
    InvSqrtPauliX,
    CNOT,
    ControlledPauliZ,
    ControlledPhaseShift,
    SWAP,
)
from .multi_qubit_gates import MultiQubitMS, MultiQubitZZ, MultiQubitCNOT, QFT, CallDefinedGate
from .pragmas import (
    PragmaGlobalPhase,
    PragmaSetNumberOfMeasurements,
    PragmaRepeatedMeasurement,
    PragmaActiveReset,
    MeasureQubit,
    DefinitionBit,
    DefinitionFloat,
)
from ..util.log import get_logger
logger = get_logger(__name__)


OPERATIONS: Dict[str, Type[Operation]] = {
    cls.__name__: cls
    for cls in (
        RotateX,
        RotateY,
        RotateZ,
        PhaseShiftState1,
        Hadamard,
        PauliX,
        PauliY,
        PauliZ,
        SGate,
        TGate,
        SqrtPauliX,
        InvSqrtPauliX,
        CNOT,
        ControlledPauliZ,
        ControlledPhaseShift,
        SWAP,
        MultiQubitMS,
        MultiQubitZZ,
        MultiQubitCNOT,
        QFT,
        CallDefinedGate,
        PragmaGlobalPhase,
        PragmaSetNumberOfMeasurements,
        PragmaRepeatedMeasurement,
        PragmaActiveReset,
        MeasureQubit,
        DefinitionBit,
        DefinitionFloat,
    )
}


def operation_from_dict(blob: Mapping[str, Any]) -> Operation:
    """Rebuild an operation from the record produced by ``Operation.to_dict``."""
    try:
        name = blob["hqslang"]
    except KeyError:
        raise ValueError(f"Record {dict(blob)!r} carries no 'hqslang' entry") from None
    try:
        cls = OPERATIONS[name]
    except KeyError:
        logger.debug(f"Unknown operation '{name}', known: {sorted(OPERATIONS)}")
        raise ValueError(f"Unknown operation '{name}'") from None
    return cls.from_dict(blob)
