from .utilities import (
    QirkError,
    InitError,
    RemappingError,
    SubstitutionError,
    DecompositionError,
    MatrixEvaluationError,
    remap_indices,
    embed_unitary,
)
from .dtypes import SymbolicFloat, Calculator
from .operation import (
    Involved,
    Operation,
    GateOperation,
    SingleQubitGate,
    TwoQubitGate,
    MultiQubitGate,
    PragmaOperation,
    MeasurementOperation,
    DefinitionOperation,
)
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
from .quantum import Circuit
from .register import ClassicalRegister
from .serialization import OPERATIONS, operation_from_dict
from . import passes
