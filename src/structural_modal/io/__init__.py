"""Result persistence."""

from .cache import MATRIX_KEYS, ModalResult, ModalResultCache

__all__ = ["MATRIX_KEYS", "ModalResult", "ModalResultCache"]
