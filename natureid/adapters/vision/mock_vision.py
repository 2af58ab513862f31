import dataclasses
import random
from natureid.adapters.vision.base import IdentificationAdapter
from natureid.orchestrator.contracts import IdentificationRequest, IdentificationResult

CANNED = [
    IdentificationResult(
        species_name="Red Fox",
        scientific_name="Vulpes vulpes",
        species_classification="Mammal",
        habitat="Forests, grasslands, mountains and urban areas across the Northern Hemisphere.",
        diet="Omnivore: rodents, rabbits, birds, fruit and insects.",
        conservation_status="Least Concern",
        interesting_facts="Foxes use the Earth's magnetic field to aim their pounces.",
        confidence=92.5,
        venomous=False,
    ),
    IdentificationResult(
        species_name="Common Sunflower",
        scientific_name="Helianthus annuus",
        species_classification="Flowering plant",
        habitat="Open, sunny fields and roadsides; native to North America.",
        diet="Photosynthesis.",
        conservation_status="Not Evaluated",
        interesting_facts="Young flower heads track the sun from east to west during the day.",
        confidence=88.0,
    ),
    IdentificationResult(
        species_name="Eastern Diamondback Rattlesnake",
        scientific_name="Crotalus adamanteus",
        species_classification="Reptile",
        habitat="Pine flatwoods and coastal scrub of the southeastern United States.",
        diet="Carnivore: rabbits, rodents and birds.",
        conservation_status="Least Concern",
        interesting_facts="The largest venomous snake in North America.",
        confidence=64.0,
        venomous=True,
    ),
]

class MockVision(IdentificationAdapter):
    def __init__(self, status_store):
        self.status = status_store

    def identify(self, request: IdentificationRequest) -> IdentificationResult:
        # Mock: ignore image, return a canned species
        result = dataclasses.replace(random.choice(CANNED))
        self.status.log(f"mock_vision: {result.species_name}")
        return result
