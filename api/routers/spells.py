"""
Spells router - katalog spelli, składanie i cast w arenie testowej.
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from typing import List, Dict, Any, Optional
from pathlib import Path

from spellcraft.core.config_loader import ConfigLoader
from spellcraft.core.errors import InvalidCompositionStateError
from spellcraft.core.rng import GameRNG
from spellcraft.spells.base_spells import BASE_SPELLS
from spellcraft.spells.builder import BuildContext, SpellBuilder, describe_spell
from spellcraft.spells.modifiers import MODIFIER_SPELLS
from spellcraft.simulation.encounter import Encounter, EncounterConfig


router = APIRouter()

DATA_PATH = Path(__file__).parent.parent.parent / "data"
_loader = ConfigLoader(str(DATA_PATH))


# ═══════════════════════════════════════════════════════════════════════════
# REQUEST/RESPONSE MODELS
# ═══════════════════════════════════════════════════════════════════════════

class BuildRequest(BaseModel):
    """
    Request do złożenia spella.

    Brak `base` = losowanie jak na ekranie nagrody.
    """
    base: Optional[str] = None
    modifiers: List[str] = []
    power: float = 0
    wave: int = 1
    seed: Optional[int] = None


class CastRequest(BaseModel):
    """Request do castu złożonego spella w arenie z manekinami."""
    base: str = "arcane_bolt"
    modifiers: List[str] = []
    wave: int = 1
    player_class: str = "mage"
    enemies: int = 3
    enemy_hp: int = 100
    seed: Optional[int] = None


def _kind(key: str) -> str:
    if key in BASE_SPELLS:
        return "base"
    if key in MODIFIER_SPELLS:
        return "modifier"
    return "unknown"


def _assemble(builder: SpellBuilder, owner, base: str, modifiers: List[str], context: BuildContext):
    try:
        return builder.assemble(owner, base, modifiers, context)
    except InvalidCompositionStateError as e:
        raise HTTPException(status_code=404, detail=str(e))


# ═══════════════════════════════════════════════════════════════════════════
# ENDPOINTS
# ═══════════════════════════════════════════════════════════════════════════

@router.get("/spells")
async def get_spells() -> List[Dict[str, Any]]:
    """
    Zwraca listę wszystkich wpisów katalogu.

    Returns:
        Lista spelli bazowych i modyfikatorów z nazwą i opisem.
    """
    catalog = _loader.load_spell_catalog()
    return [
        {
            "key": key,
            "kind": _kind(key),
            "name": entry.get("name", key),
            "description": entry.get("description", ""),
        }
        for key, entry in catalog.items()
    ]


@router.get("/spells/{key}")
async def get_spell(key: str) -> Dict[str, Any]:
    """
    Zwraca surową definicję wpisu katalogu.

    Args:
        key: Klucz spella lub modyfikatora
    """
    entry = _loader.load_spell_catalog().lookup(key)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Spell '{key}' not found")
    return {"key": key, "kind": _kind(key), "definition": entry}


@router.post("/spells/build")
async def build_spell(request: BuildRequest) -> Dict[str, Any]:
    """
    Składa spell z podanych kluczy albo losowo.

    Returns:
        Statystyki efektywne, łańcuch warstw i opis na ekran nagrody.
    """
    builder = SpellBuilder(_loader.load_spell_catalog(), rng=GameRNG(request.seed))
    context = BuildContext(power=request.power, wave=request.wave)
    if request.base is None:
        spell = builder.build(None, context)
    else:
        spell = _assemble(builder, None, request.base, request.modifiers, context)

    result = spell.to_dict()
    result["description"] = describe_spell(spell)
    return result


@router.post("/spells/cast")
async def cast_spell(request: CastRequest) -> Dict[str, Any]:
    """
    Składa spell i rzuca go raz w arenie testowej.

    Returns:
        Wynik castu, stan areny i pełny log zdarzeń.
    """
    encounter = Encounter(
        _loader,
        seed=request.seed,
        config=EncounterConfig(
            wave=request.wave,
            player_class=request.player_class,
            dummy_count=request.enemies,
            dummy_hp=request.enemy_hp,
        ),
    )
    encounter.setup()
    context = encounter.caster.build_context(request.wave)
    spell = _assemble(encounter.builder, encounter.caster, request.base, request.modifiers, context)
    encounter.equip(0, spell)

    cast = await encounter.cast(0)
    events = encounter.event_logger.to_dict()["events"]

    return {
        "seed": request.seed,
        "cast": cast,
        "spell": spell.to_dict(),
        "summary": encounter.summary(),
        "events": events,
        "total_events": len(events),
    }
