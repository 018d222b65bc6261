"""
Operation capability contract.

Every IR operation is an attrs frozen class deriving from one of the category
bases below. Fields are declared with ``qubit_field``, ``qubits_field``,
``parameter_field`` and ``parameters_field`` so the shared machinery can find
the qubit roles and the symbolic parameters of any variant:

    Operation
    ├── GateOperation           (unitary_matrix)
    │   ├── SingleQubitGate
    │   ├── TwoQubitGate
    │   └── MultiQubitGate      (circuit)
    ├── PragmaOperation
    ├── MeasurementOperation
    └── DefinitionOperation

Substitution and remapping go through ``attrs.evolve`` and hence always return
a fresh value.
"""
from typing import Any, ClassVar, Dict, FrozenSet, List, Mapping, Tuple, Union, TYPE_CHECKING
import abc
import enum
import operator

import attrs
import numpy as np
from attrs import field

from .dtypes import SymbolicFloat, to_symbolic, is_symbolic, serialize_symbolic, substitute_symbolic, as_resolver
from .utilities import (
    InitError,
    RemappingError,
    DecompositionError,
    MatrixEvaluationError,
    check_mapping_total,
    remap_indices,
)
from ..util.log import get_logger
logger = get_logger(__name__)

if TYPE_CHECKING:
    from .quantum import Circuit


class Involved(enum.Enum):
    """Non-set answers of involved-qubit analysis."""
    ALL = "All"
    NONE = "None"


InvolvedQubits = Union[Involved, FrozenSet[int]]

ROLE = "qirk_role"
QUBIT, QUBITS, PARAMETER, PARAMETERS = "qubit", "qubits", "parameter", "parameters"


def _to_qubit(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError(f"Qubit index must be an integer, got {value!r}")
    return operator.index(value)


def _to_qubits(values: Any) -> Tuple[int, ...]:
    if isinstance(values, (str, bytes)):
        raise TypeError(f"Qubits must be a sequence of integers, got {values!r}")
    return tuple(_to_qubit(v) for v in values)


def _non_negative(instance, attribute, value):
    indices = value if isinstance(value, tuple) else (value,)
    for index in indices:
        if index < 0:
            raise InitError(f"{type(instance).__name__}.{attribute.name}: qubit index {index} is negative")


def _to_parameters(values: Any) -> Tuple[SymbolicFloat, ...]:
    if isinstance(values, (str, bytes)):
        raise TypeError(f"Parameters must be a sequence, got {values!r}")
    return tuple(to_symbolic(v) for v in values)


def qubit_field(**kwargs):
    return field(converter=_to_qubit, validator=_non_negative, metadata={ROLE: QUBIT}, **kwargs)


def qubits_field(**kwargs):
    return field(converter=_to_qubits, validator=_non_negative, metadata={ROLE: QUBITS}, **kwargs)


def parameter_field(**kwargs):
    return field(converter=to_symbolic, metadata={ROLE: PARAMETER}, **kwargs)


def parameters_field(**kwargs):
    return field(converter=_to_parameters, metadata={ROLE: PARAMETERS}, **kwargs)


def _fields_with_role(cls, *roles: str) -> List["attrs.Attribute"]:
    return [a for a in attrs.fields(cls) if a.metadata.get(ROLE) in roles]


class Operation(abc.ABC):
    """Base of every IR operation (gates, pragmas, measurements, definitions)."""

    _tag_path: ClassVar[Tuple[str, ...]] = ("Operation",)

    def __attrs_post_init__(self):
        qubits = self._role_qubits()
        if len(set(qubits)) != len(qubits):
            raise InitError(f"{self.hqslang}: qubit indices {list(qubits)} are not unique")

    @property
    def hqslang(self) -> str:
        return type(self).__name__

    @property
    def tags(self) -> Tuple[str, ...]:
        return self._tag_path + (self.hqslang,)

    # -- qubits ----------------------------------------------------------
    def _role_qubits(self) -> Tuple[int, ...]:
        """All qubit indices held in qubit-role fields, in declaration order."""
        qubits: List[int] = []
        for attribute in _fields_with_role(type(self), QUBIT, QUBITS):
            value = getattr(self, attribute.name)
            qubits.extend(value if isinstance(value, tuple) else (value,))
        return tuple(qubits)

    def involved_qubits(self) -> InvolvedQubits:
        return frozenset(self._role_qubits())

    def remap_qubits(self, mapping: Mapping[int, int]) -> "Operation":
        """Return a copy with every qubit role sent through ``mapping``.

        Raises:
            RemappingError: ``mapping`` misses an involved qubit, or maps two
                roles onto the same qubit.
        """
        involved = self.involved_qubits()
        if isinstance(involved, Involved):
            return self._remap_global(mapping)
        check_mapping_total(involved, mapping)

        changes = {}
        for attribute in _fields_with_role(type(self), QUBIT, QUBITS):
            value = getattr(self, attribute.name)
            if isinstance(value, tuple):
                changes[attribute.name] = remap_indices(value, mapping)
            else:
                changes[attribute.name] = mapping[value]
        try:
            return attrs.evolve(self, **changes)
        except InitError as exc:
            targets = [mapping[q] for q in sorted(involved)]
            offending = next((t for t in targets if t < 0 or targets.count(t) > 1), targets[0])
            raise RemappingError(
                offending, f"Remapping {self.hqslang} onto qubit {offending} is invalid: {exc}"
            ) from exc

    def _remap_global(self, mapping: Mapping[int, int]) -> "Operation":
        # operations without a qubit set are left as they are
        return self

    # -- parameters ------------------------------------------------------
    def _parameters(self) -> Tuple[SymbolicFloat, ...]:
        params: List[SymbolicFloat] = []
        for attribute in _fields_with_role(type(self), PARAMETER, PARAMETERS):
            value = getattr(self, attribute.name)
            params.extend(value if isinstance(value, tuple) else (value,))
        return tuple(params)

    def is_parametrized(self) -> bool:
        return any(is_symbolic(p) for p in self._parameters())

    def substitute_parameters(self, resolver) -> "Operation":
        """Return a copy with every symbolic parameter evaluated to a float.

        ``resolver`` exposes ``resolve(name) -> float`` or is a mapping of
        names to floats. Either all parameters are substituted or a
        ``SubstitutionError`` is raised.
        """
        resolver = as_resolver(resolver)
        changes = {}
        for attribute in _fields_with_role(type(self), PARAMETER, PARAMETERS):
            value = getattr(self, attribute.name)
            if isinstance(value, tuple):
                changes[attribute.name] = tuple(substitute_symbolic(v, resolver) for v in value)
            else:
                changes[attribute.name] = substitute_symbolic(value, resolver)
        if not changes:
            return self
        return attrs.evolve(self, **changes)

    # -- serialization ---------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        """Structural record of the named fields, tagged with ``hqslang``."""
        blob: Dict[str, Any] = {"hqslang": self.hqslang}
        for attribute in attrs.fields(type(self)):
            value = getattr(self, attribute.name)
            role = attribute.metadata.get(ROLE)
            if role == PARAMETER:
                value = serialize_symbolic(value)
            elif role == PARAMETERS:
                value = [serialize_symbolic(v) for v in value]
            elif isinstance(value, tuple):
                value = list(value)
            elif isinstance(value, dict):
                value = dict(value)
            blob[attribute.name] = value
        return blob

    @classmethod
    def from_dict(cls, blob: Mapping[str, Any]) -> "Operation":
        """Invert ``to_dict`` for this variant."""
        name = blob.get("hqslang", cls.__name__)
        if name != cls.__name__:
            raise ValueError(f"Record describes {name}, not {cls.__name__}")
        kwargs = {a.name: blob[a.name] for a in attrs.fields(cls) if a.name in blob}
        return cls(**kwargs)


class GateOperation(Operation):
    """Operation acting as a unitary transform on its qubits."""

    _tag_path = ("Operation", "GateOperation")

    def unitary_matrix(self) -> np.ndarray:
        """Closed-form unitary, first declared qubit as most significant factor.

        Raises:
            MatrixEvaluationError: a parameter is still symbolic.
        """
        if self.is_parametrized():
            symbolic = [str(p) for p in self._parameters() if is_symbolic(p)]
            raise MatrixEvaluationError(
                f"Cannot build the unitary of {self.hqslang}: symbolic parameters {symbolic}"
            )
        return self._unitary_matrix()

    @abc.abstractmethod
    def _unitary_matrix(self) -> np.ndarray:
        ...


class SingleQubitGate(GateOperation):
    _tag_path = ("Operation", "GateOperation", "SingleQubitGateOperation")


class RotationGate(SingleQubitGate):
    _tag_path = ("Operation", "GateOperation", "SingleQubitGateOperation", "Rotation")


class TwoQubitGate(GateOperation):
    _tag_path = ("Operation", "GateOperation", "TwoQubitGateOperation")


class MultiQubitGate(GateOperation):
    """Gate on an ordered qubit list with a fixed decomposition rule."""

    _tag_path = ("Operation", "GateOperation", "MultiQubitGateOperation")

    def unitary_matrix(self) -> np.ndarray:
        if not self.qubits:
            raise MatrixEvaluationError(f"{self.hqslang} acts on no qubits")
        return super().unitary_matrix()

    def circuit(self) -> "Circuit":
        """Equivalent circuit of elementary one- and two-qubit gates.

        Raises:
            DecompositionError: the gate is declared over zero qubits.
        """
        from .quantum import Circuit

        if not self.qubits:
            raise DecompositionError(f"{self.hqslang} cannot be decomposed on zero qubits")
        operations = self._decompose()
        logger.debug(f"{self.hqslang} on {list(self.qubits)} -> {len(operations)} operations")
        return Circuit(operations)

    @abc.abstractmethod
    def _decompose(self) -> List[Operation]:
        ...


class PragmaOperation(Operation):
    _tag_path = ("Operation", "PragmaOperation")


class MeasurementOperation(Operation):
    _tag_path = ("Operation", "Measurement")


class DefinitionOperation(Operation):
    _tag_path = ("Operation", "Definition")

    def involved_qubits(self) -> InvolvedQubits:
        return Involved.NONE
