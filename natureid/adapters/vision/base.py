from natureid.orchestrator.contracts import IdentificationRequest, IdentificationResult
from natureid.orchestrator.errors import IdentificationError
from natureid.services.models import IdentifySpeciesOut

PROMPT = (
    "You are an expert naturalist. Identify the species (animal, plant, fungus or other "
    "organism) shown in this photo.\n\n"
    "Reply with ONLY one JSON object, no prose, with these keys:\n"
    '  "speciesName": common name\n'
    '  "scientificName": binomial name\n'
    '  "speciesClassification": e.g. "Mammal", "Reptile", "Flowering plant"\n'
    '  "habitat": where it lives\n'
    '  "diet": what it eats (or how it obtains nutrients)\n'
    '  "conservationStatus": IUCN status if known\n'
    '  "interestingFacts": two or three short facts\n'
    '  "confidence": your confidence in the identification, a number from 0 to 100\n'
    '  "venomous": true or false, ONLY if the organism is an animal for which venom is '
    "relevant; omit the key otherwise\n"
)


def parse_result(raw: str) -> IdentificationResult:
    """Parse the model's reply into an IdentificationResult. Tolerates ``` fences and
    prose around the object; raises IdentificationError / pydantic.ValidationError."""
    start, end = raw.find("{"), raw.rfind("}")
    if start < 0 or end <= start:
        raise IdentificationError(f"no JSON object in response: {raw[:120]!r}")
    return IdentifySpeciesOut.model_validate_json(raw[start:end + 1]).to_result()


class IdentificationAdapter:
    _ready = True

    def identify(self, request: IdentificationRequest) -> IdentificationResult:
        """Run the remote identification call. Raises on any failure."""
        raise NotImplementedError
