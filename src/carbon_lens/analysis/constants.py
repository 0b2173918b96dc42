from __future__ import annotations

from dataclasses import dataclass

# kg CO2 absorbed per tree per year (EPA figure)
TREE_CO2_ABSORPTION_PER_YEAR = 22
# years
AVERAGE_TREE_LIFESPAN = 40

DAYS_PER_YEAR = 365


@dataclass(frozen=True)
class FootprintConstants:
    tree_co2_absorption_per_year: float = TREE_CO2_ABSORPTION_PER_YEAR
    average_tree_lifespan: float = AVERAGE_TREE_LIFESPAN
    days_per_year: int = DAYS_PER_YEAR

    @property
    def absorption_per_tree(self) -> float:
        """kg CO2 one tree absorbs over its whole life."""
        return self.tree_co2_absorption_per_year * self.average_tree_lifespan


@dataclass(frozen=True)
class HumanFootprint:
    """
    Published global per-capita figures substituted for any detected person.
    The same values are quoted to the model in the prompt.
    """
    lifetime_total_kg_co2: float = 400000.0
    daily_operation_kg_co2: float = 15.0
    manufacturing_kg_co2: float = 0.0
    lifespan_years: float = 73.0
    confidence_score: float = 0.95
    region_label: str = "Global standardized"
    data_source_label: str = "Global standardized human values"
    source_name: str = "Global Carbon Project - per-capita CO2 emissions"
    source_reliability: float = 0.9
    source_year: str = "2023"
    source_url: str = "https://globalcarbonbudget.org/"

    @property
    def calculation_basis(self) -> str:
        return (
            f"Global standardized human value: {self.lifetime_total_kg_co2:g} kg CO2 over a "
            f"{self.lifespan_years:g} year lifespan at {self.daily_operation_kg_co2:g} kg CO2 per day"
        )


DEFAULT_CONSTANTS = FootprintConstants()
HUMAN_FOOTPRINT = HumanFootprint()
