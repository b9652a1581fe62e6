"""
Schémas Pydantic pour les soumissions d'élèves.
Les champs sont exposés en camelCase (format du frontend et des colonnes du store).
"""

from enum import IntEnum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RiskLevel(IntEnum):
    """Niveau de risque ordinal, stocké sous forme de code entier."""
    NONE = 0  # état initial
    SAFE = 1
    MEDIUM_RISK = 2
    HIGH_RISK = 3


class StudentSubmission(BaseModel):
    """
    Soumission reçue en POST /api/students.
    Seuls `id` et `fullName` sont contrôlés (présents et non vides) ; les autres
    champs, connus ou non, sont transmis au store sans validation ni conversion.
    """
    id: Any
    full_name: Any = Field(alias="fullName")
    class_name: Any = Field(default=None, alias="className")
    school: Any = None
    province: Any = None
    score: Any = None
    risk_level: Any = Field(default=None, alias="riskLevel")
    risk_level_name: Any = Field(default=None, alias="riskLevelName")
    timestamp: Any = None

    model_config = ConfigDict(extra="allow")

    @field_validator("id", "full_name")
    @classmethod
    def not_empty(cls, v: Any) -> Any:
        if not v:
            raise ValueError("Le champ ne peut pas être vide.")
        return v

    def to_row(self) -> dict:
        """
        Ligne à insérer : le corps reçu tel quel.
        Si `riskLevelName` est absent et que `riskLevel` est un code connu,
        le libellé est dérivé du code.
        """
        row = self.model_dump(by_alias=True, exclude_unset=True)
        if "riskLevelName" not in row and "riskLevel" in row:
            level = _risk_level(row["riskLevel"])
            if level is not None:
                row["riskLevelName"] = level.name
        return row


def _risk_level(code: Any) -> Optional[RiskLevel]:
    if isinstance(code, bool) or not isinstance(code, int):
        return None
    try:
        return RiskLevel(code)
    except ValueError:
        return None


class MessageResponse(BaseModel):
    """Corps des réponses de statut (succès ou erreur)."""
    message: str
    error: Optional[str] = None
