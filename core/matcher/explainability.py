#!/usr/bin/env python3
"""
Explainability Module - Evidence and human-readable explanations for a match.

Provides:
- Supporting snippets from the candidate profile for each requirement
- One-sentence explanation per requirement
- Strengths, gaps and recommendations across all requirement matches
"""

from typing import List, Optional, Tuple
import logging

from core.config_loader import MatchingPolicy
from core.matcher.keywords import extract_keywords
from core.matcher.models import (
    CandidateProfile, Requirement, RequirementCategory, RequirementMatch
)
from core.utils import round_half_up

logger = logging.getLogger(__name__)


def _format_years(years: float) -> str:
    if float(years).is_integer():
        return str(int(years))
    return f"{years:g}"


def _mentions(text: Optional[str], keywords: List[str]) -> bool:
    """True if text contains, or is contained by, any keyword."""
    if not text:
        return False
    text = text.lower()
    return any(keyword in text or text in keyword for keyword in keywords)


def find_evidence(
    profile: CandidateProfile,
    requirement: Requirement,
    max_evidence: int = 3
) -> List[str]:
    """
    Find entries in a candidate profile supporting a requirement.

    Scans skills, then experience, then education for entries mentioning a
    requirement keyword.

    Args:
        profile: Candidate profile
        requirement: Requirement to find evidence for
        max_evidence: Maximum number of evidence strings

    Returns:
        Evidence strings such as "Skill: Python (5 years)"
    """
    keywords = extract_keywords(requirement.description)
    if not keywords:
        return []

    evidence: List[str] = []

    for skill in profile.skills:
        if _mentions(skill.name, keywords):
            if skill.years_of_experience is None:
                evidence.append(f"Skill: {skill.name}")
            else:
                evidence.append(f"Skill: {skill.name} ({_format_years(skill.years_of_experience)} years)")

    for exp in profile.experience:
        if _mentions(exp.title, keywords) or _mentions(exp.description, keywords):
            evidence.append(f"Experience: {exp.title} at {exp.company}")

    for edu in profile.education:
        if _mentions(edu.degree, keywords) or _mentions(edu.field_of_study, keywords):
            evidence.append(f"Education: {edu.degree} in {edu.field_of_study}")

    return evidence[:max_evidence]


def explain_requirement(
    requirement: Requirement,
    matched: bool,
    confidence: float,
    evidence: List[str]
) -> str:
    """Render a one-sentence explanation of a requirement match."""
    confidence_percent = round_half_up(confidence * 100)

    if matched:
        explanation = f'Strong match ({confidence_percent}% confidence) for "{requirement.description}".'
        if evidence:
            explanation += f" Evidence: {', '.join(evidence)}."
        return explanation

    explanation = f'Partial match ({confidence_percent}% confidence) for "{requirement.description}".'
    if evidence:
        explanation += f" Some relevant experience found: {', '.join(evidence)}."
    else:
        explanation += " No direct evidence found in candidate profile."
    return explanation


def extract_insights(
    detailed_analysis: List[RequirementMatch],
    policy: Optional[MatchingPolicy] = None
) -> Tuple[List[str], List[str], List[str]]:
    """
    Summarize requirement matches into strengths, gaps and recommendations.

    - strength: matched with confidence >= strength_threshold
    - gap: unmatched MUST requirement (each also gets a training recommendation)
    - recommendation: otherwise, confidence in [improvement_threshold, match_threshold)

    Returns:
        (strengths, gaps, recommendations), truncated to the policy limits
    """
    policy = policy or MatchingPolicy()
    strengths: List[str] = []
    gaps: List[str] = []
    recommendations: List[str] = []

    for analysis in detailed_analysis:
        description = analysis.requirement.description

        if analysis.matched and analysis.confidence >= policy.strength_threshold:
            strengths.append(f"Strong in {description}")
        elif not analysis.matched and analysis.requirement.category == RequirementCategory.MUST:
            gaps.append(f"Missing: {description}")
            recommendations.append(f"Consider training or certification in {description}")
        elif policy.improvement_threshold <= analysis.confidence < policy.match_threshold:
            recommendations.append(f"Could strengthen {description} skills")

    return (
        strengths[:policy.max_strengths],
        gaps[:policy.max_gaps],
        recommendations[:policy.max_recommendations],
    )
