"""
Formulas router - ewaluacja formuł RPN (podgląd dla autorów danych).
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from typing import Dict, Any, List
from pathlib import Path

from spellcraft.core.config_loader import ConfigLoader
from spellcraft.core.errors import SpellcraftError
from spellcraft.core.rpn import evaluate, evaluate_float
from spellcraft.core.validation import validate_all


router = APIRouter()

DATA_PATH = Path(__file__).parent.parent.parent / "data"
_loader = ConfigLoader(str(DATA_PATH))


class EvaluateRequest(BaseModel):
    """Request do ewaluacji formuły."""
    expression: str
    variables: Dict[str, float] = {}
    integer: bool = False


@router.post("/formulas/evaluate")
async def evaluate_formula(request: EvaluateRequest) -> Dict[str, Any]:
    """
    Ewaluuje formułę RPN.

    Args:
        request.expression: Np. "25 power 5 / +"
        request.variables: Mapa zmiennych
        request.integer: True = ewaluator całkowity (spawny)

    Returns:
        Wynik; błąd formuły -> 422 z opisem
    """
    try:
        if request.integer:
            variables = {name: int(value) for name, value in request.variables.items()}
            result = evaluate(request.expression, variables)
        else:
            result = evaluate_float(request.expression, request.variables)
    except SpellcraftError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return {
        "expression": request.expression,
        "variables": request.variables,
        "integer": request.integer,
        "result": result,
    }


@router.get("/formulas/validate")
async def validate_formulas() -> List[Dict[str, Any]]:
    """Waliduje wszystkie formuły w plikach danych."""
    _loader.reload()
    return [issue.to_dict() for issue in validate_all(_loader)]
