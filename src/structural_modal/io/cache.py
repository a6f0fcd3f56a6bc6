"""Persistence of modal results and system matrices handed over by the FE toolkit."""
from __future__ import annotations

import json
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import numpy as np
from scipy.sparse import coo_matrix, issparse, load_npz, save_npz


MATRIX_KEYS = ("stiffness", "mass", "geometric_stiffness")


@dataclass
class ModalResult:
    eigenvalues: np.ndarray
    frequencies: np.ndarray
    eigenvectors: Optional[np.ndarray]
    components: Dict[str, Any]


class ModalResultCache:
    """Cache spectra and sparse matrices on disk, one directory per run."""

    spectra_filename = "spectra.npz"
    metadata_filename = "metadata.json"

    def __init__(self, base_path: Path) -> None:
        self.base_path = Path(base_path)

    def _resolve(self, name: str) -> Path:
        return self.base_path / name

    def available(self, name: str, *, metadata: Optional[Mapping[str, object]] = None) -> bool:
        """True when the entry holds spectra or system matrices.

        Entries with matrices only must be solved before :meth:`load`; see
        :meth:`has_spectra`.
        """
        path = self._resolve(name)
        meta_file = path / self.metadata_filename
        if not meta_file.exists():
            return False
        if not (path / self.spectra_filename).exists() and not any(
                (path / f"{key}.npz").exists() for key in MATRIX_KEYS):
            return False
        if metadata is None:
            return True
        try:
            with meta_file.open("r", encoding="utf-8") as handle:
                stored = json.load(handle)
        except json.JSONDecodeError:
            return False
        return stored == json.loads(json.dumps(dict(metadata)))

    def has_spectra(self, name: str) -> bool:
        """True when :meth:`load` can return spectra for ``name``."""
        path = self._resolve(name)
        return (path / self.metadata_filename).exists() and (path / self.spectra_filename).exists()

    def metadata(self, name: str) -> Dict[str, Any]:
        with (self._resolve(name) / self.metadata_filename).open("r", encoding="utf-8") as handle:
            return json.load(handle)

    def load(self, name: str) -> ModalResult:
        path = self._resolve(name)
        spectra_file = path / self.spectra_filename
        if not spectra_file.exists():
            raise FileNotFoundError(f"No cached spectra under {path}.")
        with np.load(spectra_file) as spectra:
            eigenvalues = spectra["eigenvalues"]
            frequencies = spectra["frequencies"]
            eigenvectors = spectra["eigenvectors"] if "eigenvectors" in spectra.files else None
        return ModalResult(
            eigenvalues=eigenvalues,
            frequencies=frequencies,
            eigenvectors=eigenvectors,
            components=self.load_matrices(name),
        )

    def load_matrices(self, name: str) -> Dict[str, Any]:
        path = self._resolve(name)
        components: Dict[str, Any] = {}
        for key in MATRIX_KEYS:
            file = path / f"{key}.npz"
            if file.exists():
                components[key] = load_npz(file)
        return components

    def save(
        self,
        name: str,
        *,
        eigenvalues: np.ndarray,
        frequencies: np.ndarray,
        eigenvectors: Optional[np.ndarray] = None,
        metadata: Mapping[str, object],
    ) -> None:
        path = self._resolve(name)
        path.mkdir(parents=True, exist_ok=True)
        arrays = {
            "eigenvalues": np.asarray(eigenvalues, dtype=float),
            "frequencies": np.asarray(frequencies, dtype=float),
        }
        if eigenvectors is not None:
            arrays["eigenvectors"] = np.asarray(eigenvectors)
        np.savez(path / self.spectra_filename, **arrays)
        self._write_metadata(path, metadata)

    def save_matrices(self, name: str, *, components: Mapping[str, Any], metadata: Mapping[str, object]) -> None:
        unknown = set(components) - set(MATRIX_KEYS)
        if unknown:
            raise ValueError(f"Unknown matrix components: {sorted(unknown)}")
        path = self._resolve(name)
        path.mkdir(parents=True, exist_ok=True)
        for key, matrix in components.items():
            if matrix is None:
                continue
            if not issparse(matrix):
                matrix = coo_matrix(matrix)
            save_npz(path / f"{key}.npz", matrix)
        self._write_metadata(path, metadata)

    def drop(self, name: str) -> None:
        path = self._resolve(name)
        if not path.exists():
            return
        shutil.rmtree(path)

    def _write_metadata(self, path: Path, metadata: Mapping[str, object]) -> None:
        with (path / self.metadata_filename).open("w", encoding="utf-8") as handle:
            json.dump(dict(metadata), handle, ensure_ascii=False,
                      indent=2, sort_keys=True)
