"""
Relics router - relikty i oferta po fali.
"""

from fastapi import APIRouter, Query
from typing import Any, Dict, List, Optional
from pathlib import Path

from spellcraft.core.config_loader import ConfigLoader
from spellcraft.core.rng import GameRNG
from spellcraft.relics.relic_manager import RelicManager


router = APIRouter()

DATA_PATH = Path(__file__).parent.parent.parent / "data"
_config = ConfigLoader(str(DATA_PATH))


def _manager(seed: Optional[int] = None) -> RelicManager:
    manager = RelicManager(GameRNG(seed))
    manager.load_relics(_config.load_relic_definitions())
    return manager


@router.get("/relics")
async def get_relics() -> List[Dict[str, Any]]:
    """Zwraca listę wszystkich reliktów."""
    return [relic.to_dict() for relic in _manager().relics.values()]


@router.get("/relics/offer")
async def get_offer(wave: int = Query(..., ge=1), seed: Optional[int] = None) -> Dict[str, Any]:
    """
    Oferta reliktów po zakończeniu fali (co 3 fale).

    Args:
        wave: Numer zakończonej fali
        seed: Ziarno losowości oferty
    """
    return {
        "wave": wave,
        "relics": [relic.to_dict() for relic in _manager(seed).offer(wave)],
    }
