from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Set, Union

import numpy as np

from .operation import Operation, GateOperation, Involved, InvolvedQubits
from .dtypes import as_resolver
from .utilities import MatrixEvaluationError, embed_unitary
from ..util.log import get_logger
logger = get_logger(__name__)


class Circuit:
    """Ordered sequence of operations; insertion order is execution order."""

    def __init__(self, operations: Optional[Sequence[Operation]] = None):
        self.operations: List[Operation] = []
        for operation in operations or ():
            self.add(operation)

    def add(self, operation: Operation) -> None:
        assert isinstance(
            operation, Operation
        ), f"{operation!r} must be an Operation, got {type(operation)} instead"
        self.operations.append(operation)

    def __iadd__(self, other: Union[Operation, "Circuit"]) -> "Circuit":
        if isinstance(other, Circuit):
            for operation in other.operations:
                self.add(operation)
        elif isinstance(other, Operation):
            self.add(other)
        else:
            return NotImplemented
        return self

    def __add__(self, other: Union[Operation, "Circuit"]) -> "Circuit":
        if not isinstance(other, (Operation, Circuit)):
            return NotImplemented
        result = Circuit(self.operations)
        result += other
        return result

    def __iter__(self) -> Iterator[Operation]:
        return iter(self.operations)

    def __len__(self) -> int:
        return len(self.operations)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return Circuit(self.operations[index])
        return self.operations[index]

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Circuit):
            return NotImplemented
        return self.operations == other.operations

    __hash__ = None

    # -- queries ---------------------------------------------------------
    def is_parametrized(self) -> bool:
        return any(op.is_parametrized() for op in self.operations)

    def involved_qubits(self) -> InvolvedQubits:
        """ALL if any operation involves all qubits, else the union of qubit sets (NONE if empty)."""
        qubits: Set[int] = set()
        for op in self.operations:
            involved = op.involved_qubits()
            if involved is Involved.ALL:
                return Involved.ALL
            if involved is not Involved.NONE:
                qubits |= involved
        return frozenset(qubits) if qubits else Involved.NONE

    def count_occurences(self, tags: Sequence[str]) -> int:
        """Number of operations carrying at least one of ``tags``."""
        wanted = set(tags)
        return sum(1 for op in self.operations if wanted.intersection(op.tags))

    def get_operation_types(self) -> Set[str]:
        return {op.hqslang for op in self.operations}

    def depth(self) -> int:
        """Longest chain of operations sharing qubits.

        Operations involving ALL qubits synchronise every qubit seen so far,
        operations involving NONE do not count.
        """
        depth_at_idx: Dict[int, int] = {}
        barrier = 0
        for op in self.operations:
            involved = op.involved_qubits()
            if involved is Involved.NONE:
                continue
            if involved is Involved.ALL:
                barrier = max([barrier] + list(depth_at_idx.values())) + 1
                depth_at_idx = {idx: barrier for idx in depth_at_idx}
                continue
            new_depth = max(depth_at_idx.get(idx, barrier) for idx in involved)
            for idx in involved:
                depth_at_idx[idx] = new_depth + 1
        return max([barrier] + list(depth_at_idx.values()))

    # -- transformations -------------------------------------------------
    def substitute_parameters(self, resolver) -> "Circuit":
        """Substitute every operation; the first failure aborts the whole circuit."""
        resolver = as_resolver(resolver)
        return Circuit([op.substitute_parameters(resolver) for op in self.operations])

    def remap_qubits(self, mapping: Mapping[int, int]) -> "Circuit":
        return Circuit([op.remap_qubits(mapping) for op in self.operations])

    def unitary_matrix(self, qubits: Optional[Sequence[int]] = None) -> np.ndarray:
        """Product of the embedded operation matrices in circuit order.

        ``qubits`` fixes the tensor order of the result (first entry most
        significant); by default the involved qubits in ascending order.

        Raises:
            MatrixEvaluationError: an operation is not a gate, is still
                parametrized, or acts outside ``qubits``.
        """
        if qubits is None:
            involved = self.involved_qubits()
            if involved is Involved.ALL:
                raise MatrixEvaluationError("Circuit involves all qubits, pass `qubits` explicitly")
            qubits = [] if involved is Involved.NONE else sorted(involved)
        qubits = list(qubits)
        position = {q: i for i, q in enumerate(qubits)}

        total = np.eye(2 ** len(qubits), dtype=complex)
        for op in self.operations:
            if not isinstance(op, GateOperation):
                raise MatrixEvaluationError(f"{op.hqslang} has no unitary matrix")
            op_qubits = op._role_qubits()
            missing = [q for q in op_qubits if q not in position]
            if missing:
                raise MatrixEvaluationError(f"{op.hqslang} acts on qubits {missing} outside {qubits}")
            embedded = embed_unitary(op.unitary_matrix(), [position[q] for q in op_qubits], len(qubits))
            total = embedded @ total
        return total

    # -- serialization ---------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {"operations": [op.to_dict() for op in self.operations]}

    @classmethod
    def from_dict(cls, blob: Mapping[str, Any]) -> "Circuit":
        from .serialization import operation_from_dict

        return cls([operation_from_dict(record) for record in blob["operations"]])

    def __repr__(self) -> str:
        return f"Circuit({self.operations!r})"

    def __str__(self) -> str:
        """
        <Circuit 3 qubits, 13 operations (CNOT:6, Hadamard:5, MeasureQubit:2), depth=7>
        """
        op_hist: Dict[str, int] = {}
        for op in self.operations:
            op_hist[op.hqslang] = op_hist.get(op.hqslang, 0) + 1
        op_summary = ", ".join(f"{name}:{cnt}" for name, cnt in sorted(op_hist.items()))

        involved = self.involved_qubits()
        if isinstance(involved, Involved):
            qubit_str = involved.value.lower()
        else:
            qubit_str = str(len(involved))
        return (
            f"<Circuit {qubit_str} qubits, "
            f"{len(self.operations)} operations ({op_summary}), "
            f"depth={self.depth()}>"
        )
