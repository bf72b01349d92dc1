"""Derived project and street totals."""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from .models import Meter, Project, Street
from .type_helpers import DiameterReduction, EssentialStatus, to_number_or_none


@dataclass(slots=True)
class StreetTotals:
    """Footage to be replaced on one street, split by essential status and by diameter reduction."""

    essential_length: float = 0
    non_essential_length: float = 0
    reduction_lengths: dict[DiameterReduction, float] = field(default_factory=dict)

    @property
    def has_reductions(self) -> bool:
        return bool(self.reduction_lengths)


def street_totals(street: Street) -> StreetTotals:
    """
    Sum the length to be replaced of a street's segments.

    Segments without an essential status count towards neither footage total.
    A segment adds to the reduction footage only when it names a reduction and
    has a non-zero length; reductions are listed in first-seen order.
    """
    totals = StreetTotals()
    for segment in street.main_segments:
        length: float = to_number_or_none(segment.length_to_be_replaced) or 0
        if segment.essential_status is EssentialStatus.ESSENTIAL:
            totals.essential_length += length
        elif segment.essential_status is EssentialStatus.NON_ESSENTIAL:
            totals.non_essential_length += length
        if segment.diameter_reduction is not DiameterReduction.NONE and length:
            reduction: DiameterReduction = segment.diameter_reduction
            totals.reduction_lengths[reduction] = totals.reduction_lengths.get(reduction, 0) + length
    return totals


def meter_annual_usage(meter: Meter, annual_hdd: float | None = None) -> float:
    """
    Annual consumption of a meter in therms.

    `annual_hdd` is accepted so callers can pass the project's heating degree
    days; usage is currently taken as entered, without degree-day weighting.
    """
    return to_number_or_none(meter.udd_usage) or 0


def recalc_project_totals(project: Project) -> Project:
    """
    Recompute the cached totals of a project from its tree.

    Missing or non-numeric lengths and usages count as zero. Only the two cache
    fields are written; the rest of the tree is read, never changed.
    """
    replaced: float = 0
    usage: float = 0
    for segment in project.iter_segments():
        replaced += to_number_or_none(segment.length_to_be_replaced) or 0
        for service in segment.services:
            for meter in service.meters:
                usage += meter_annual_usage(meter, project.annual_hdd)
    project.total_replaced_length = replaced
    project.total_annual_usage = usage
    logger.debug(
        "Project {project} totals: replaced={replaced}, usage={usage}",
        project=project.project_name or "<untitled>",
        replaced=replaced,
        usage=usage,
    )
    return project
