"""
Flat delivery fees per neighborhood served by the store.
"""
from decimal import Decimal
from typing import Dict, List, Optional

NEIGHBORHOOD_FEES: Dict[str, Decimal] = {
    "Nova Esperança": Decimal("5"),
    "Vale do Sol": Decimal("5"),
    "Santa Júlia": Decimal("5"),
    "Engenho": Decimal("5"),
    "Bosque Brasil": Decimal("8"),
    "Bosque das Colinas": Decimal("7"),
    "Rosas dos Ventos": Decimal("6"),
    "Passagem de Areia": Decimal("7"),
    "Santa Tereza": Decimal("6"),
    "Bela Parnamirim": Decimal("8"),
    "Santos Reis": Decimal("6"),
    "Monte Castelo": Decimal("7"),
    "Vida Nova": Decimal("8"),
    "Cidade Campestre": Decimal("10"),
    "Conjunto Flamboyants": Decimal("10"),
    "Cajupiranga": Decimal("7"),
    "Centro": Decimal("7"),
    "Cohabinal": Decimal("6"),
    "Boa Esperança": Decimal("7"),
    "Jardim Planalto": Decimal("8"),
    "Liberdade": Decimal("9"),
    "Parque de Exposições": Decimal("10"),
}


def is_served(name: Optional[str]) -> bool:
    return bool(name) and name in NEIGHBORHOOD_FEES


def fee_for(name: Optional[str]) -> Decimal:
    """fee for the neighborhood, 0 when none is chosen yet or it isn't served."""
    if not name:
        return Decimal("0")
    return NEIGHBORHOOD_FEES.get(name, Decimal("0"))


def list_neighborhoods() -> List[dict]:
    return [{"name": name, "fee": float(fee)} for name, fee in NEIGHBORHOOD_FEES.items()]
