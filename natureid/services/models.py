from pydantic import BaseModel, ConfigDict, Field
from typing import Literal, Optional
from natureid.orchestrator.contracts import IdentificationResult

class IdentifySpeciesOut(BaseModel):
    """Output of the identification call. camelCase on the wire."""
    model_config = ConfigDict(populate_by_name=True)

    species_name: str = Field(alias="speciesName")
    scientific_name: str = Field(alias="scientificName")
    species_classification: str = Field(alias="speciesClassification")
    habitat: str
    diet: str
    conservation_status: str = Field(alias="conservationStatus")
    interesting_facts: str = Field(alias="interestingFacts")
    confidence: float = Field(ge=0, le=100)
    venomous: Optional[bool] = None

    def to_result(self) -> IdentificationResult:
        return IdentificationResult(**self.model_dump())

    @classmethod
    def from_result(cls, result: IdentificationResult) -> "IdentifySpeciesOut":
        return cls(
            species_name=result.species_name,
            scientific_name=result.scientific_name,
            species_classification=result.species_classification,
            habitat=result.habitat,
            diet=result.diet,
            conservation_status=result.conservation_status,
            interesting_facts=result.interesting_facts,
            confidence=result.confidence,
            venomous=result.venomous,
        )

class IdentifyRequestIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    photo_data_uri: str = Field(alias="photoDataUri")  # data:<mime>;base64,...

class NotificationOut(BaseModel):
    title: str
    description: str
    variant: str = "destructive"

class ResultViewOut(BaseModel):
    confidence_label: str
    low_confidence: bool
    venom_badge: Optional[Literal["Venomous", "Non-Venomous"]] = None

class StatusResponse(BaseModel):
    phase: Literal["idle", "capturing", "loading", "error", "success"]
    loading: bool
    capturing: bool = False
    drag_active: bool = False
    accepted: Optional[bool] = None        # set on acquisition endpoints only
    error_code: Optional[str] = None
    image_data_uri: Optional[str] = None
    result: Optional[IdentifySpeciesOut] = None
    view: Optional[ResultViewOut] = None
    error: Optional[str] = None
    alerts: list[str] = []                 # read-and-clear
    notifications: list[NotificationOut] = []   # read-and-clear
    logs: list[str] = []

class CameraResponse(BaseModel):
    ok: bool
    capturing: bool
    alerts: list[str] = []

class DragResponse(BaseModel):
    ok: bool
    drag_active: bool
