"""
Language: semantic vocabularies and colour representations

One enum covers both roles:
- vocabularies for Character entries (canonical, energy, values, society)
- representations for Colour entries (hex, name)
"""

from enum import Enum


class Language(str, Enum):
    """Vocabulary or representation language"""

    # Semantic vocabularies (Character entries)
    CANONICAL = "canonical"   # Elementary Systematics standard vocabulary
    ENERGY = "energy"         # affirming / denying / reconciling
    VALUES = "values"
    SOCIETY = "society"

    # Representation types (Colour entries)
    HEX = "hex"               # "#FF0000"
    NAME = "name"             # "Red"

    @property
    def is_vocabulary(self) -> bool:
        return self in VOCABULARIES

    @property
    def is_representation(self) -> bool:
        return self in REPRESENTATIONS


VOCABULARIES = (Language.CANONICAL, Language.ENERGY, Language.VALUES, Language.SOCIETY)
REPRESENTATIONS = (Language.HEX, Language.NAME)
