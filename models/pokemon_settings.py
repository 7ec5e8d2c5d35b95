# models/pokemon_settings.py
from dataclasses import dataclass


@dataclass
class PokemonSettings:
    id: int = 0
    name: str = ''
