"""
Entities whose statements are collected.

The built-in list can be replaced by a JSON file mapping tax id to name:

    {"03091627": "Codeus", "03360962": "Infinum"}
"""

import json
from pathlib import Path

from statement_retrieval.taxis_portal.errors import ConfigurationError
from statement_retrieval.taxis_portal.models import Entity

DEFAULT_ENTITIES: tuple[Entity, ...] = (
    Entity("03014215", "Coinis"),
    Entity("02686473", "Domen"),
    Entity("02775018", "CoreIT"),
    Entity("02632284", "Logate"),
    Entity("02783061", "Bild Studio"),
    Entity("02907259", "Amplitudo"),
    Entity("03073572", "Datum Solutions"),
    Entity("02713098", "Poslovna Inteligencija"),
    Entity("03037258", "International Bridge"),
    Entity("02731517", "Fleka"),
    Entity("02679744", "Datalab"),
    Entity("03167453", "Omnitech"),
    Entity("03131343", "SynergySuite"),
    Entity("03122123", "Alicorn"),
    Entity("03066258", "Codingo"),
    Entity("03274357", "Uhura Solutions"),
    Entity("02246244", "Winsoft"),
    Entity("02177579", "Cikom"),
    Entity("02961717", "Media Monkeys"),
    Entity("03091627", "Codeus"),
    Entity("03084434", "Digital Control"),
    Entity("03165663", "Ridgemax"),
    Entity("03360962", "Infinum"),
    Entity("03191451", "Kodio"),
    Entity("03381447", "EPAM"),
    Entity("03413772", "First Line Software"),
    Entity("03374700", "Vega IT Omega"),
    Entity("03373398", "Quantox Technology"),
    Entity("03216446", "Ooblee"),
    Entity("03209296", "BIXBIT"),
    Entity("03367053", "GoldBear Technologies"),
    Entity("03421198", "G5 Entertainment"),
    Entity("03428184", "Tungsten Montenegro"),
    Entity("03110222", "BGS Consulting"),
    Entity("03413381", "Artec 3D Adriatica"),
    Entity("03413616", "Customertimes Montenegro"),
    Entity("03200116", "Codepixel"),
    Entity("03403912", "Codemine"),
    Entity("03418545", "Belka"),
    Entity("03489159", "Playrix"),
    Entity("03424804", "FSTR"),
    Entity("03442586", "Arctic 7"),
)


def load_entities(path: Path | str | None = None) -> tuple[Entity, ...]:
    """
    Load the entity list, preserving file order.

    Args:
        path: JSON file with a tax id -> display name object; the built-in
            list is returned when omitted

    Raises:
        ConfigurationError: If the file cannot be read or has the wrong shape
    """
    if path is None:
        return DEFAULT_ENTITIES

    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read entity list {path}: {e}") from e

    if not isinstance(data, dict) or not data:
        raise ConfigurationError(f"Entity list {path} must be a non-empty JSON object")

    entities = []
    for tax_id, name in data.items():
        if not isinstance(name, str) or not name.strip():
            raise ConfigurationError(f"Entity {tax_id} in {path} has no display name")
        entities.append(Entity(tax_id=tax_id.strip(), display_name=name.strip()))
    return tuple(entities)


def select_entities(entities: tuple[Entity, ...], tax_ids: list[str] | None) -> tuple[Entity, ...]:
    """Restrict entities to the given tax ids, keeping configured order."""
    if not tax_ids:
        return entities
    wanted = set(tax_ids)
    unknown = wanted - {e.tax_id for e in entities}
    if unknown:
        raise ConfigurationError(f"Unknown tax ids: {', '.join(sorted(unknown))}")
    return tuple(e for e in entities if e.tax_id in wanted)
