import logging
from typing import Any, List, Optional, Tuple

from sqlalchemy import select

from core.exceptions import NotFoundError
from core.matcher.models import (
    DEFAULT_REQUIREMENT_WEIGHT, JobRequirementSet, OriginLevel, Requirement,
    RequirementCategory, RequirementType
)
from database.models import CompanyJobVariant, JobTemplate, RequirementItem
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


def _enum_or_none(enum_cls, value: Optional[str], item_id: Any):
    if value is None:
        return None
    try:
        return enum_cls(value.strip().lower())
    except ValueError:
        logger.warning(f"Requirement {item_id} has unknown {enum_cls.__name__} {value!r}")
        return None


def requirement_from_item(item: RequirementItem, origin_level: OriginLevel) -> Requirement:
    """Map a requirement row onto a Requirement value (validation happens at aggregation)."""
    return Requirement(
        id=str(item.id),
        description=item.description,
        category=_enum_or_none(RequirementCategory, item.category, item.id),
        weight=item.weight if item.weight is not None else DEFAULT_REQUIREMENT_WEIGHT,
        type=_enum_or_none(RequirementType, item.type, item.id),
        alternatives=tuple(item.alternatives or ()),
        origin_level=origin_level
    )


class JobRequirementRepository(BaseRepository):
    def _requirements(self, column, owner_id: Any, origin_level: OriginLevel) -> Tuple[Requirement, ...]:
        if owner_id is None:
            return ()
        stmt = (
            select(RequirementItem)
            .where(column == owner_id)
            .order_by(RequirementItem.created_at, RequirementItem.id)
        )
        items: List[RequirementItem] = self.db.execute(stmt).scalars().all()
        return tuple(requirement_from_item(item, origin_level) for item in items)

    def get_for_job(self, job_ref: Any) -> JobRequirementSet:
        """Get family, template and variant requirements of a job variant.

        Raises:
            NotFoundError: If the job variant does not exist
        """
        variant_uuid = self.parse_id("Job variant", job_ref)
        variant = self.db.get(CompanyJobVariant, variant_uuid)
        if variant is None:
            raise NotFoundError("Job variant", job_ref)

        template: Optional[JobTemplate] = variant.template
        family_id = template.job_family_id if template is not None else None

        requirement_set = JobRequirementSet(
            job_id=str(variant.id),
            family_requirements=self._requirements(RequirementItem.job_family_id, family_id, OriginLevel.FAMILY),
            template_requirements=self._requirements(RequirementItem.job_template_id, variant.job_template_id, OriginLevel.TEMPLATE),
            variant_requirements=self._requirements(RequirementItem.company_job_variant_id, variant.id, OriginLevel.VARIANT),
            title=variant.custom_title or (template.name if template is not None else None),
            description=variant.custom_description
        )

        logger.debug(
            f"Job {job_ref}: {len(requirement_set.family_requirements)} family, "
            f"{len(requirement_set.template_requirements)} template, "
            f"{len(requirement_set.variant_requirements)} variant requirements"
        )
        return requirement_set
