from __future__ import annotations

from typing import Any, Dict, Optional, Sequence, Tuple

import numpy as np
import scipy.sparse as sp
from scipy.sparse.linalg import norm as sparse_norm

from mbproj.core.ops.algebra import hermitian_error
from mbproj.core.ops.types import Operator
from mbproj.core.options import AuditOptions


def _top_abs_entries(
    op: Operator, k: int
) -> Sequence[Tuple[float, Tuple[int, int], complex]]:
    if op.is_sparse:
        coo = sp.coo_matrix(op.data)
        rows, cols, vals = coo.row, coo.col, coo.data
    else:
        m = np.asarray(op.data)
        rows, cols = np.indices(m.shape)
        rows, cols, vals = rows.ravel(), cols.ravel(), m.ravel()

    a = np.abs(vals)
    if a.size == 0:
        return []
    k = min(int(k), int(a.size))
    # partial selection then sort those
    idx = np.argpartition(a, -k)[-k:]
    idx = idx[np.argsort(a[idx])[::-1]]
    return [
        (float(a[n]), (int(rows[n]), int(cols[n])), complex(vals[n])) for n in idx
    ]


def _fro_norm(op: Operator) -> float:
    if op.is_sparse:
        return float(sparse_norm(op.data))
    return float(np.linalg.norm(np.asarray(op.data).ravel()))


def audit_operator(
    op: Operator,
    *,
    label: str = "",
    options: Optional[AuditOptions] = None,
) -> Dict[str, Any]:
    """
    Structured report for a single operator.

    Meant to catch:
    - unexpected bases / shapes
    - huge/small norms, unexpected fill-in of lifted operators
    - non-Hermitian Hamiltonians (optional)
    """
    opt = options or AuditOptions()

    report: Dict[str, Any] = {
        "label": label,
        "basis_l": repr(op.basis_l),
        "basis_r": repr(op.basis_r),
        "shape": op.shape,
        "sparse": op.is_sparse,
        "fro_norm": _fro_norm(op),
    }
    if op.is_sparse:
        report["nnz"] = int(np.count_nonzero(op.data.data))
    else:
        report["nnz"] = int(np.count_nonzero(op.data))
    D = op.shape[0] * op.shape[1]
    report["fill"] = float(report["nnz"]) / D if D else 0.0

    if opt.check_hermitian:
        if op.is_square:
            err = hermitian_error(op)
            report["hermitian_max_abs_err"] = err
            report["is_hermitian"] = bool(err <= opt.hermitian_atol)
        else:
            report["is_hermitian"] = False

    report["top_entries"] = _top_abs_entries(op, opt.top_entries)
    return report
