# parsers/input_parser.py

from dataclasses import dataclass
from typing import Any, Dict
import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from couplers.mapping import N_AZIMUTHAL, ANGLE_OFFSET

class CouplingModel(BaseModel):
    power: float = Field(gt=0.0)  # total power [W]
    max_timesteps: int = Field(ge=1)
    max_picard_iter: int = Field(ge=1)
    n_azimuthal: int = Field(default=N_AZIMUTHAL, ge=1)
    angle_offset: float = ANGLE_OFFSET

class DriverModel(BaseModel):
    driver: str  # "package.module:ClassName"
    options: Dict[str, Any] = {}

    @field_validator("driver")
    @classmethod
    def check_driver_path(cls, value):
        module_name, sep, class_name = value.partition(":")
        if not sep or not module_name or not class_name:
            raise ValueError(f"Driver must be given as 'module:ClassName', got '{value}'")
        return value

class InputDeckModel(BaseModel):
    coupling: CouplingModel
    transport: DriverModel
    heat: DriverModel

@dataclass
class InputDeck:
    coupling: CouplingModel
    transport: DriverModel
    heat: DriverModel

    @staticmethod
    def from_dict(data: dict) -> 'InputDeck':
        try:
            input_model = InputDeckModel(**data)
        except ValidationError as e:
            print("Input Deck Validation Error:")
            print(e.json())
            raise e

        return InputDeck(
            coupling=input_model.coupling,
            transport=input_model.transport,
            heat=input_model.heat,
        )

    @staticmethod
    def from_yaml(file_path: str) -> 'InputDeck':
        with open(file_path, 'r') as f:
            data = yaml.safe_load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Input deck {file_path} is empty or is not a mapping.")
        return InputDeck.from_dict(data)
