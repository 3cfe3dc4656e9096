import uuid

from sqlalchemy import Column, Integer, Text, String, TIMESTAMP, ForeignKey, Boolean, CheckConstraint, Index
from sqlalchemy.sql import text as sql_text
from sqlalchemy.dialects.postgresql import UUID, ARRAY
from sqlalchemy.orm import relationship

from .base import Base


class JobFamily(Base):
    """Broadest level of the job hierarchy (e.g. "Software Engineering")."""
    __tablename__ = 'job_families'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    skill_categories = Column(ARRAY(Text))
    organization_id = Column(UUID(as_uuid=True), nullable=False)

    created_at = Column(TIMESTAMP(timezone=True), server_default=sql_text("now()"))
    updated_at = Column(TIMESTAMP(timezone=True), server_default=sql_text("now()"))

    # Relationships
    templates = relationship("JobTemplate", back_populates="family", cascade="all, delete-orphan")
    requirements = relationship("RequirementItem", back_populates="job_family", cascade="all, delete-orphan")


class JobTemplate(Base):
    """Role template within a family (e.g. "Senior Backend Engineer")."""
    __tablename__ = 'job_templates'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    job_family_id = Column(UUID(as_uuid=True), ForeignKey('job_families.id', ondelete='CASCADE'), nullable=False)
    name = Column(String(255), nullable=False)
    level = Column(String(50))  # junior|mid|senior|lead|principal
    experience_range_min = Column(Integer)
    experience_range_max = Column(Integer)

    created_at = Column(TIMESTAMP(timezone=True), server_default=sql_text("now()"))
    updated_at = Column(TIMESTAMP(timezone=True), server_default=sql_text("now()"))

    # Relationships
    family = relationship("JobFamily", back_populates="templates")
    variants = relationship("CompanyJobVariant", back_populates="template", cascade="all, delete-orphan")
    requirements = relationship("RequirementItem", back_populates="job_template", cascade="all, delete-orphan")


class CompanyJobVariant(Base):
    """A company's concrete opening derived from a template; the unit candidates are matched against."""
    __tablename__ = 'company_job_variants'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    job_template_id = Column(UUID(as_uuid=True), ForeignKey('job_templates.id', ondelete='CASCADE'), nullable=False)
    company_profile_id = Column(UUID(as_uuid=True), nullable=False)
    custom_title = Column(String(255))
    custom_description = Column(Text)
    is_active = Column(Boolean, default=True)
    published_at = Column(TIMESTAMP(timezone=True))

    created_at = Column(TIMESTAMP(timezone=True), server_default=sql_text("now()"))
    updated_at = Column(TIMESTAMP(timezone=True), server_default=sql_text("now()"))

    # Relationships
    template = relationship("JobTemplate", back_populates="variants")
    requirements = relationship("RequirementItem", back_populates="company_job_variant", cascade="all, delete-orphan")
    applications = relationship("Application", back_populates="company_job_variant", cascade="all, delete-orphan")


class RequirementItem(Base):
    """
    A single requirement owned by exactly one level of the job hierarchy.

    Exactly one of job_family_id / job_template_id / company_job_variant_id is set.
    """
    __tablename__ = 'requirement_items'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    type = Column(String(50))  # skill|experience|education|certification|other
    category = Column(String(50))  # must|should|nice
    description = Column(Text, nullable=False)
    weight = Column(Integer, default=5)
    alternatives = Column(ARRAY(Text))

    job_family_id = Column(UUID(as_uuid=True), ForeignKey('job_families.id', ondelete='CASCADE'))
    job_template_id = Column(UUID(as_uuid=True), ForeignKey('job_templates.id', ondelete='CASCADE'))
    company_job_variant_id = Column(UUID(as_uuid=True), ForeignKey('company_job_variants.id', ondelete='CASCADE'))

    created_at = Column(TIMESTAMP(timezone=True), server_default=sql_text("now()"))

    # Relationships
    job_family = relationship("JobFamily", back_populates="requirements")
    job_template = relationship("JobTemplate", back_populates="requirements")
    company_job_variant = relationship("CompanyJobVariant", back_populates="requirements")

    __table_args__ = (
        CheckConstraint('weight >= 1 AND weight <= 10', name='ck_requirement_weight'),
        CheckConstraint(
            '(job_family_id IS NOT NULL)::int + (job_template_id IS NOT NULL)::int '
            '+ (company_job_variant_id IS NOT NULL)::int = 1',
            name='ck_requirement_single_owner'
        ),
        Index('idx_requirement_template', 'job_template_id'),
        Index('idx_requirement_variant', 'company_job_variant_id'),
    )
