"""Domain types shared by the calculators and the persistence layer."""

from .snapshot import DebtLike, DebtSnapshot, snapshot_of

__all__ = ["DebtLike", "DebtSnapshot", "snapshot_of"]
