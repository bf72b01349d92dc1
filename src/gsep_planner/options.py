"""Drop-down choices offered by the plan entry forms."""

from __future__ import annotations

from .type_helpers import (
    DiameterReduction,
    LeakDetectionMethod,
    PurposeOption,
    ServiceWorkType,
    StructureType,
)

TOWNS: tuple[str, ...] = tuple(sorted(("Fitchburg", "Lunenburg", "Ashby", "Westminster", "Gardner")))

PIPE_DIAMETERS: tuple[float, ...] = (1, 2, 3, 4, 6, 8, 10, 12, 14, 16, 18)
SERVICE_PIPE_DIAMETERS: tuple[float, ...] = (0.5, 0.75, 1, 1.25, 1.5, 1.75, 2, 3, 4, 6, 8, 10, 12)
PIPE_MATERIALS: tuple[str, ...] = (
    "Cast Iron",
    "Bare Steel",
    "Unprotected Coated Steel",
    "Protected Coated Steel",
    "Legacy Plastic HDPE",
    "Legacy Plastic MDPE",
    "Aldyl a pipe",
)

REPLACEMENT_PIPE_DIAMETERS: tuple[float, ...] = (2, 4, 6, 8, 10, 12)
REPLACEMENT_PIPE_MATERIALS: tuple[str, ...] = ("HDPE", "Coated Steel")
REPLACEMENT_PIPE_METHODS: tuple[str, ...] = ("Open-Cut", "Insertion", "Pipe Bursting", "HDD")
MAOP_OPTIONS: tuple[str, ...] = ("14 Inches W.C.", "30 psig", "99 psig")

# Choices shown to the user; the empty "not set" members are left out.
PRIMARY_PURPOSE_OPTIONS: tuple[str, ...] = tuple(
    option.value for option in PurposeOption if option is not PurposeOption.NOT_SET
)
SERVICE_WORK_TYPES: tuple[str, ...] = tuple(
    work_type.value for work_type in ServiceWorkType if work_type is not ServiceWorkType.NOT_SET
)
STRUCTURE_TYPES: tuple[str, ...] = tuple(
    structure.value
    for structure in StructureType
    if structure not in (StructureType.NOT_SET, StructureType.OTHER)
)
DIAMETER_REDUCTIONS: tuple[str, ...] = tuple(
    reduction.value for reduction in DiameterReduction if reduction is not DiameterReduction.NONE
)

LEAK_DETECTION_REASONS: dict[LeakDetectionMethod, tuple[str, ...]] = {
    LeakDetectionMethod.CISBOT: (
        'The pipe diameter is too small (<12")',
        "The pipe barrel is cracked, fractured, or heavily pitted (structurally unsound)",
        "The pipe alignment includes sharp bends, offsets, or non-standard fittings",
        "A launch pit cannot be constructed due to underground congestion or pavement restrictions",
        "The segment is short or small-diameter where replacement is faster and cheaper",
        "The segment is already scheduled for retirement or NPA/electrification in the near term",
        "A ≥10-year life extension cannot be demonstrated for regulatory approval",
        "A future scheduled encroachment will trigger replacement under 220 CMR 113.06/113.07",
        "Traffic or permitting constraints prevent prolonged robotic operations in the project area",
        "A qualified contractor or equipment is not available for the project timeline",
        "The work window is too short (downtowns, school zones, etc.) for robotic sealing",
    ),
    LeakDetectionMethod.RELINING: (
        'The pipe diameter is too small (<4") or the cast iron geometry is irregular',
        "The pipe alignment has offsets, sags, or multiple bends that prevent liner insertion",
        "The service connections are too numerous or complex (each must be re-tapped after lining)",
        "The relining material lowers allowable MAOP or reduces capacity below system requirements",
        "The pipe is crushed, deformed, or subject to heavy water infiltration",
        "The lining material is incompatible with gas contaminants or local soil conditions",
        "Long-term compliance under 49 CFR 192 / ASME B31.8 cannot be demonstrated",
        "The high upfront cost makes lining uneconomical for the project segment",
        "A future scheduled encroachment will require replacement under 220 CMR 113.06/113.07",
        "Seasonal or weather conditions prevent successful installation (e.g., cold weather cure failures)",
        "The worksite is too constrained to handle equipment footprint or resin operations",
        "Extended outages needed for cleaning, prep, and cure cannot be supported",
    ),
    LeakDetectionMethod.KEYHOLE: (
        "The leak is deeper than ~6 ft or located under pavement/structures that restrict access",
        "More than one leak is present on the segment (systemic deterioration vs isolated issue)",
        "The pipe shows structural problems beyond localized joint leaks",
        "The repair materials cannot demonstrate ≥10 years of service life",
        "The leak density is high enough that repeated repairs would exceed replacement cost",
        "The DPU or regulatory review deems the repair insufficient for long-term risk reduction",
        "A future scheduled encroachment requires replacement under 220 CMR 113.06/113.07",
        "Traffic control costs for repeated keyholes exceed replacement cost for the segment",
        "Frozen ground or wet conditions prevent effective sealing",
        "Noise or dust limits prohibit repeated excavation in sensitive areas",
    ),
    LeakDetectionMethod.SEI: (
        "The pipe is degraded or structurally unsound (repairs would not address the root condition)",
        "The leak density is high, making multiple targeted repairs uneconomical",
        "The repair cannot demonstrate ≥10 years of effectiveness",
        "The sealing compound or injection method is unproven under local freeze/thaw or saturation conditions",
        "The repair results in recurring methane emissions or requires repeat excavations",
        "Replacement is required for long-term safety and system integrity",
        "A future scheduled encroachment will require replacement under 220 CMR 113.06/113.07",
        "Repeated repair cycles would cause unacceptable community disruption",
        "The contractor or specialized materials are not available in time for the project",
        "Winter construction moratoria prevent repairs before replacement season begins",
    ),
}
