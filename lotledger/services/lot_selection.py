from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Iterable, Mapping

from lotledger.app.db.models.core_types import LotPolicy
from lotledger.app.db.models.models_v1 import Lot

LotSelector = Callable[[Iterable[Lot]], Lot | None]


def _age_key(lot: Lot):
    # created_at identique -> départage par id (ordre de création)
    return (lot.created_at, lot.id)


def oldest_first(lots: Iterable[Lot]) -> Lot | None:
    """FIFO: le lot le plus ancien est consommé en premier."""
    return min(lots, key=_age_key, default=None)


def newest_first(lots: Iterable[Lot]) -> Lot | None:
    """LIFO: le lot le plus récent est consommé en premier."""
    return max(lots, key=_age_key, default=None)


# Table figée au chargement du module, injectée dans AllocationEngine
LOT_SELECTORS: Mapping[LotPolicy, LotSelector] = MappingProxyType(
    {
        LotPolicy.fifo: oldest_first,
        LotPolicy.lifo: newest_first,
    }
)


def select_lot(
    lots: Iterable[Lot],
    policy: LotPolicy,
    selectors: Mapping[LotPolicy, LotSelector] = LOT_SELECTORS,
) -> Lot | None:
    """
    Choisit un lot parmi `lots` selon la politique.

    Lecture seule. Retourne None si aucun lot (cas normal, pas une erreur).
    """
    return selectors[LotPolicy(policy)](lots)
