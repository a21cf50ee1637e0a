"""
Typed equipment specs.

Equipment.specs is stored as JSON with camelCase keys. Its shape depends
on Equipment.type, which is the only discriminant: specs are always
parsed through the model registered for the item's type, never guessed
from which keys happen to be present.

Usage:
    specs = specs_for(equipment)
    if isinstance(specs, PaddleSpecs):
        print(specs.core_thickness)
"""

from typing import Any, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from paddlerank.db.models import Equipment, EquipmentType


class _Specs(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class PaddleSpecs(_Specs):
    weight: float = Field(gt=0, description="Ounces")
    grip_size: float = Field(gt=0, description="Grip circumference, inches")
    length: float = Field(gt=0, description="Inches")
    width: float = Field(gt=0, description="Inches")
    core_material: Literal["polymer", "nomex", "aluminum"]
    surface_material: Literal["carbon", "fiberglass", "graphite", "composite"]
    core_thickness: float = Field(gt=0, description="Millimetres")
    swing_weight: Optional[float] = None


class ShoeSpecs(_Specs):
    weight: float = Field(gt=0, description="Ounces")
    drop_height: float = Field(ge=0, description="Heel-to-toe drop, millimetres")
    court_type: Literal["indoor", "outdoor", "both"]


EquipmentSpecs = Union[PaddleSpecs, ShoeSpecs]

SPEC_MODELS: dict[EquipmentType, type[_Specs]] = {
    EquipmentType.PADDLE: PaddleSpecs,
    EquipmentType.SHOE: ShoeSpecs,
}


def parse_specs(
    equipment_type: Union[EquipmentType, str],
    raw: Optional[Mapping[str, Any]],
) -> Optional[EquipmentSpecs]:
    """
    Parse stored specs with the model for equipment_type.

    Returns None when no specs are stored.

    Raises:
        ValueError: Unknown equipment type, or specs that don't fit the
            type's model (pydantic's ValidationError is a ValueError)
    """
    model = SPEC_MODELS[EquipmentType(equipment_type)]
    if raw is None:
        return None
    return model.model_validate(dict(raw))


def specs_for(equipment: Equipment) -> Optional[EquipmentSpecs]:
    """Typed specs of an equipment row."""
    return parse_specs(equipment.type, equipment.specs)


def dump_specs(equipment_type: Union[EquipmentType, str], specs: EquipmentSpecs) -> dict[str, Any]:
    """
    Serialize specs for storage, checking they match equipment_type.

    Raises:
        ValueError: specs are for a different equipment type
    """
    expected = SPEC_MODELS[EquipmentType(equipment_type)]
    if not isinstance(specs, expected):
        raise ValueError(
            f"{type(specs).__name__} cannot be stored on {EquipmentType(equipment_type).value} equipment"
        )
    return specs.model_dump(by_alias=True, exclude_none=True)
