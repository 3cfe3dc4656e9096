import uuid

from sqlalchemy import Column, Integer, Text, String, TIMESTAMP, ForeignKey, Numeric, UniqueConstraint, Index
from sqlalchemy.sql import text as sql_text
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import relationship
from pgvector.sqlalchemy import Vector

from .base import Base

CANDIDATE_EMBEDDING_DIMENSIONS = 1536


class Candidate(Base):
    __tablename__ = 'candidates'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    location = Column(String(255))
    total_experience = Column(Integer, default=0)
    organization_id = Column(UUID(as_uuid=True), nullable=False)

    # Whole-profile embedding used by the shortlist pre-filter
    skill_embeddings = Column(Vector(CANDIDATE_EMBEDDING_DIMENSIONS))

    created_at = Column(TIMESTAMP(timezone=True), server_default=sql_text("now()"))
    updated_at = Column(TIMESTAMP(timezone=True), server_default=sql_text("now()"))

    # Relationships
    parsed_resumes = relationship(
        "ParsedResumeData",
        back_populates="candidate",
        cascade="all, delete-orphan",
        order_by="ParsedResumeData.created_at.desc()"
    )
    applications = relationship("Application", back_populates="candidate", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint('email', 'organization_id', name='uq_candidate_email_org'),
        Index('idx_candidate_embedding_hnsw', 'skill_embeddings', postgresql_using='hnsw', postgresql_with={'m': 16, 'ef_construction': 64}, postgresql_ops={'skill_embeddings': 'vector_cosine_ops'}),
    )


class ParsedResumeData(Base):
    """
    Structured resume content of a candidate.

    JSONB payloads:
    - skills: [{"name": "Python", "yearsOfExperience": 5}, ...]
    - experience: [{"title": ..., "company": ..., "description": ...}, ...]
    - education: [{"degree": ..., "fieldOfStudy": ...}, ...]
    """
    __tablename__ = 'parsed_resume_data'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    candidate_id = Column(UUID(as_uuid=True), ForeignKey('candidates.id', ondelete='CASCADE'), nullable=False)
    skills = Column(JSONB)
    experience = Column(JSONB)
    education = Column(JSONB)
    certifications = Column(JSONB)
    summary = Column(Text)
    raw_text = Column(Text)
    parsing_confidence = Column(Numeric(3, 2))

    created_at = Column(TIMESTAMP(timezone=True), server_default=sql_text("now()"))

    candidate = relationship("Candidate", back_populates="parsed_resumes")


class Application(Base):
    __tablename__ = 'applications'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    candidate_id = Column(UUID(as_uuid=True), ForeignKey('candidates.id', ondelete='CASCADE'), nullable=False)
    company_job_variant_id = Column(UUID(as_uuid=True), ForeignKey('company_job_variants.id', ondelete='CASCADE'), nullable=False)
    status = Column(String(50), default='applied')
    fit_score = Column(Integer)

    applied_at = Column(TIMESTAMP(timezone=True), server_default=sql_text("now()"))
    last_updated = Column(TIMESTAMP(timezone=True), server_default=sql_text("now()"))

    candidate = relationship("Candidate", back_populates="applications")
    company_job_variant = relationship("CompanyJobVariant", back_populates="applications")

    __table_args__ = (
        UniqueConstraint('candidate_id', 'company_job_variant_id', name='uq_application_candidate_variant'),
    )
