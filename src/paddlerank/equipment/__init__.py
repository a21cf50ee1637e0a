"""Equipment specs, typed per equipment kind."""

from paddlerank.equipment.specs import (
    EquipmentSpecs,
    PaddleSpecs,
    ShoeSpecs,
    dump_specs,
    parse_specs,
    specs_for,
)

__all__ = [
    "EquipmentSpecs",
    "PaddleSpecs",
    "ShoeSpecs",
    "dump_specs",
    "parse_specs",
    "specs_for",
]
