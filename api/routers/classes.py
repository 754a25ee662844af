"""
Classes router - klasy gracza i ich statystyki per fala.
"""

from fastapi import APIRouter, HTTPException, Query
from typing import List, Dict, Any
from pathlib import Path

from spellcraft.core.config_loader import ConfigLoader
from spellcraft.units.player_class import PlayerClassLoader


router = APIRouter()

DATA_PATH = Path(__file__).parent.parent.parent / "data"
_classes = PlayerClassLoader(ConfigLoader(str(DATA_PATH)))


@router.get("/classes")
async def get_classes() -> List[Dict[str, Any]]:
    """
    Zwraca listę klas gracza.

    Returns:
        Lista klas z formułami statystyk.
    """
    return [player_class.to_dict() for player_class in _classes.get_all_classes().values()]


@router.get("/classes/{class_id}/stats")
async def get_class_stats(class_id: str, wave: int = Query(1, ge=1)) -> Dict[str, Any]:
    """
    Statystyki klasy dla danej fali.

    Args:
        class_id: ID klasy
        wave: Numer fali
    """
    player_class = _classes.get_all_classes().get(class_id)
    if player_class is None:
        raise HTTPException(status_code=404, detail=f"Class '{class_id}' not found")
    return {
        "id": class_id,
        "wave": wave,
        "stats": player_class.stats_for_wave(wave),
    }
