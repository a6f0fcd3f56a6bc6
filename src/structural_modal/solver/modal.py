"""Generalized eigenproblem for free vibration, ``K x = omega^2 M x``."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional, Tuple

import numpy as np
import scipy.linalg as la
from scipy.sparse import csr_matrix, issparse
from scipy.sparse.linalg import eigsh


@dataclass
class SolverConfig:
    """Configuration for the sparse modal solver.

    ``sigma`` selects shift-invert mode; with ``which="LM"`` the eigenvalues
    closest to ``sigma`` are returned. ``mass_shift`` is needed for
    free-floating structures, whose stiffness is singular.
    """

    num_eigenvalues: int = 10
    which: str = "LM"
    sigma: Optional[float] = 0.0
    tol: float = 0.0
    maxiter: Optional[int] = None
    mass_shift: float = 0.0


def solve_modal(
        K,
        M,
        *,
        config: Optional[SolverConfig] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """Solve ``K x = lam M x`` for the lowest eigenpairs.

    With a mass shift ``s`` the shifted problem ``(K + s M) x = mu M x`` is
    solved and ``lam = mu - s`` is returned.
    """

    if config is None:
        config = SolverConfig()

    if config.num_eigenvalues <= 0:
        raise ValueError("num_eigenvalues must be a positive integer.")

    n = K.shape[0]
    if n != K.shape[1] or M.shape != K.shape:
        raise ValueError("K and M must be square and of equal dimensions.")

    shift = float(config.mass_shift)

    if config.num_eigenvalues >= n - 1:
        A = _to_dense(K) + shift * _to_dense(M)
        B = _to_dense(M)
        A = 0.5 * (A + A.T)
        B = 0.5 * (B + B.T)
        eigvals, eigvecs = la.eigh(A, B)
        count = min(config.num_eigenvalues, n)
        eigvals, eigvecs = _postprocess_eigensystem(
            eigvals[:count], eigvecs[:, :count], B)
        return eigvals - shift, eigvecs

    K_sparse = _to_csr(K)
    M_sparse = _to_csr(M)
    A = K_sparse + shift * M_sparse

    # Enforce symmetric structure
    A = 0.5 * (A + A.T)
    M_sparse = 0.5 * (M_sparse + M_sparse.T)

    eigvals, eigvecs = eigsh(
        A.tocsc(),
        k=config.num_eigenvalues,
        M=M_sparse.tocsc(),
        sigma=config.sigma,
        which=config.which,
        tol=float(config.tol),
        maxiter=config.maxiter,
        return_eigenvectors=True,
    )

    eigvals, eigvecs = _postprocess_eigensystem(eigvals, eigvecs, M_sparse)
    return eigvals - shift, eigvecs


def frequencies_from_eigenvalues(eigenvalues) -> np.ndarray:
    """Natural frequencies in Hz; tiny negative rigid-body eigenvalues map to 0."""
    eigenvalues = np.asarray(eigenvalues, dtype=float)
    return np.real(np.sqrt(eigenvalues.astype(complex))) / (2.0 * math.pi)


def round_significant(values, digits: int = 4) -> np.ndarray:
    scale = 10.0 ** digits
    return np.round(np.asarray(values, dtype=float) * scale) / scale


def _to_dense(matrix):
    if hasattr(matrix, "toarray"):
        return matrix.toarray()
    return np.asarray(matrix, dtype=float)


def _to_csr(matrix: Any):
    if issparse(matrix):
        return matrix.tocsr().astype(float)
    return csr_matrix(np.asarray(matrix, dtype=float))


def _postprocess_eigensystem(eigvals, eigvecs, mass_matrix):
    order = np.argsort(eigvals)
    eigvals = eigvals[order]
    eigvecs = eigvecs[:, order]

    M_eig = mass_matrix @ eigvecs
    gram = eigvecs.T @ M_eig
    diag = np.diag(gram)
    diag = np.where(diag > 0.0, diag, 1.0)
    norms = np.sqrt(diag)
    eigvecs = eigvecs / norms
    return eigvals, eigvecs
