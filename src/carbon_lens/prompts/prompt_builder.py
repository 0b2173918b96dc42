from __future__ import annotations

from typing import List, Optional

from ..analysis.constants import HUMAN_FOOTPRINT, HumanFootprint

_JSON_STRUCTURE = """{
  "objects": [
    {
      "name": string,
      "carbon_footprint": {
        "lifetime_total_kg_co2": number,
        "manufacturing_kg_co2": number,
        "daily_operation_kg_co2": number,
        "unit": "kg_co2",
        "confidence_score": number,
        "calculation_basis": string,
        "sources": [
          {
            "name": string,
            "reliability_score": number,
            "year_published": string,
            "url": string,
            "doi": string
          }
        ],
        "trees_required": number
      },
      "metadata": {
        "assumed_lifespan_years": number,
        "usage_assumptions": string,
        "data_source": string,
        "geographical_region": string,
        "methodology_source": {
          "name": string,
          "year_published": string,
          "reliability_score": number
        }
      }
    }
  ],
  "analysis_metadata": {
    "timestamp": string,
    "image_quality": string,
    "number_of_objects_detected": number,
    "default_region": string,
    "model_version": string,
    "data_sources": [
      {
        "name": string,
        "url": string,
        "year_published": string,
        "reliability_score": number
      }
    ]
  }
}"""


def build_prompt_text(
    *,
    human: HumanFootprint = HUMAN_FOOTPRINT,
    max_objects: Optional[int] = None,
    image_quality_hint: Optional[str] = None,
) -> str:
    lines: List[str] = []
    lines.append("Your task is to analyze the provided image and:")
    lines.append("1. Perform exhaustive object detection:")
    lines.append("   - Identify ALL visible objects, no matter how small or seemingly insignificant")
    lines.append("   - Detect partial or partially visible objects")
    lines.append("   - Identify materials and surfaces")
    lines.append("   - Note any text or symbols")
    lines.append("   - Note any spatial relationships between objects")
    if max_objects:
        lines.append(f"   - Report at most {max_objects} objects, most prominent first")

    lines.append("")
    lines.append("2. Carbon Footprint Calculation Rules:")
    lines.append("   - Manufacturing emissions must be > 0 and based on verified industry data")
    lines.append("   - Daily operational emissions must be 0 for non-powered items")
    lines.append("   - Daily operational emissions for powered items must include energy consumption")
    lines.append("   - Lifetime total must equal: manufacturing + (daily_operation * 365 * lifespan)")
    lines.append("   - All calculations must use verified data sources")

    lines.append("")
    lines.append("3. Specific Guidelines:")
    lines.append("   Paper Products (notebooks, books, papers):")
    lines.append("   - Manufacturing: paper production, printing, binding (2-5 kg CO2 per kg of paper)")
    lines.append("   - Daily Operation: 0 kg CO2 (non-powered item)")
    lines.append("   - Lifespan: Based on typical usage (1-5 years)")
    lines.append("   Writing Instruments (pens, pencils):")
    lines.append("   - Manufacturing: Include materials and production (0.1-0.5 kg CO2)")
    lines.append("   - Daily Operation: 0 kg CO2 (non-powered item)")
    lines.append("   - Lifespan: Based on typical usage (0.5-2 years)")
    lines.append("   Electronic Devices:")
    lines.append("   - Manufacturing: Based on verified manufacturer data")
    lines.append("   - Daily Operation: Based on power rating and usage patterns")
    lines.append("   - Lifespan: Based on typical device lifecycle")

    lines.append("")
    lines.append("4. Source Requirements:")
    lines.append("   - Include only verified environmental impact studies")
    lines.append("   - Provide DOIs for academic sources")
    lines.append("   - Use recent data (within last 5 years when available)")
    lines.append("   - Include reliability score based on source quality")
    lines.append("   - No placeholder or example URLs")

    lines.append("")
    lines.append("5. Confidence Score Guidelines:")
    lines.append("   - 0.95-1.00: Verified by multiple peer-reviewed sources")
    lines.append("   - 0.80-0.94: Government/industry standard estimates")
    lines.append("   - 0.60-0.79: Reasonable estimates with partial verification")
    lines.append("   - Below 0.60: Significant uncertainty exists")

    if image_quality_hint:
        lines.append("")
        lines.append(f"Image quality assessed before upload: {image_quality_hint}")

    lines.append("")
    lines.append("Generate the analysis in the following JSON structure:")
    lines.append(_JSON_STRUCTURE)

    lines.append("")
    lines.append("Requirements:")
    lines.append("- Every single visible object, element, or detail MUST be included in the analysis")
    lines.append("- Include a human only if a human being is directly present in the image")
    lines.append(
        "- Use these fixed values for ALL human beings detected, regardless of age, gender, or ethnicity:"
    )
    lines.append(f"  * Lifetime total: {human.lifetime_total_kg_co2:g} kg CO2")
    lines.append(f"  * Manufacturing (birth): {human.manufacturing_kg_co2:g} kg CO2")
    lines.append(f"  * Daily operation: {human.daily_operation_kg_co2:g} kg CO2")
    lines.append(f"  * Lifespan: {human.lifespan_years:g} years")
    lines.append(f'- Specify geographical region as "{human.region_label}" for humans')
    lines.append(f'- Specify data source as "{human.data_source_label}" for humans')
    lines.append("- For non-human objects, use approximate values as before")
    lines.append("- ALL fields must contain numerical values - no null values allowed")
    lines.append("- Round numerical values to 2 decimal places")
    lines.append("- Document all assumptions and averages used")
    lines.append("- Return only valid JSON, no additional text")

    return "\n".join(lines)
