"""Heuristic analysis of uploaded documents.

Counts words, spots header-like lines, checks eight policy topics by keyword
and flags structural issues. The gap strings produced here are matched
verbatim by the improvement synthesizer.
"""

import re

from askapril.core.schemas_copilot import DocumentAnalysis, ImprovementSuggestion

HEADER_PATTERN = re.compile(r"^(#{1,6}\s+|[A-Z\s]{3,}:?$|\d+\.\s+[A-Z])")
MAX_HEADERS = 10

# Topic -> keyword pattern; order fixes the order of strengths and gaps
POLICY_TOPICS: dict[str, re.Pattern[str]] = {
    "equal opportunity": re.compile(r"equal\s+opportunity|discrimination|harassment", re.IGNORECASE),
    "safety": re.compile(r"safety|emergency|accident|injury", re.IGNORECASE),
    "attendance": re.compile(r"attendance|punctuality|tardiness|absent", re.IGNORECASE),
    "dress code": re.compile(r"dress\s+code|uniform|appearance|attire", re.IGNORECASE),
    "performance": re.compile(r"performance|evaluation|review|goals", re.IGNORECASE),
    "benefits": re.compile(r"benefits|vacation|sick\s+leave|insurance", re.IGNORECASE),
    "discipline": re.compile(r"discipline|termination|corrective\s+action", re.IGNORECASE),
    "confidentiality": re.compile(r"confidential|privacy|proprietary|non-disclosure", re.IGNORECASE),
}

WELL_STRUCTURED_MIN_HEADERS = 5
BRIEF_WORD_COUNT = 500
COMPREHENSIVE_WORD_COUNT = 2000

HANDBOOK_REQUIRED_SECTIONS = ["welcome", "policies", "benefits", "conduct", "safety"]


def topic_gap(topic: str) -> str:
    return f"Missing {topic} policies"


def topic_strength(topic: str) -> str:
    return f"Contains {topic} policies"


def analyze_existing_document(content: str, document_type: str | None) -> DocumentAnalysis:
    """
    Analyze an uploaded document's coverage and structure.

    Args:
        content: Raw document text
        document_type: Catalog document type, if the user picked one

    Returns:
        DocumentAnalysis with headers, strengths and gaps
    """
    lines = [line for line in content.split("\n") if line.strip()]
    headers = [line for line in lines if HEADER_PATTERN.match(line)][:MAX_HEADERS]

    analysis = DocumentAnalysis(word_count=len(content.split()), sections=headers)

    for topic, pattern in POLICY_TOPICS.items():
        if pattern.search(content):
            analysis.strengths.append(topic_strength(topic))
        else:
            analysis.gaps.append(topic_gap(topic))

    if len(analysis.sections) >= WELL_STRUCTURED_MIN_HEADERS:
        analysis.strengths.append("Well-structured with multiple sections")
    else:
        analysis.gaps.append("Could benefit from better organization")

    if analysis.word_count > COMPREHENSIVE_WORD_COUNT:
        analysis.strengths.append("Comprehensive content")
    elif analysis.word_count < BRIEF_WORD_COUNT:
        analysis.gaps.append("Document may be too brief")

    if document_type == "employee-handbook":
        lowered = content.lower()
        missing = [section for section in HANDBOOK_REQUIRED_SECTIONS if section not in lowered]
        if missing:
            analysis.gaps.append(f"Missing sections: {', '.join(missing)}")

    return analysis


def generate_improvement_suggestions(analysis: DocumentAnalysis) -> list[ImprovementSuggestion]:
    """Group analysis findings into prioritized suggestion buckets."""
    suggestions: list[ImprovementSuggestion] = []

    if analysis.gaps:
        suggestions.append(
            ImprovementSuggestion(
                category="Content Gaps",
                priority="High",
                items=analysis.gaps[:3],
                description="These important topics should be added to make your document more comprehensive.",
            )
        )

    if len(analysis.sections) < WELL_STRUCTURED_MIN_HEADERS:
        suggestions.append(
            ImprovementSuggestion(
                category="Structure",
                priority="Medium",
                items=[
                    "Add clear section headers",
                    "Organize content into logical sections",
                    "Include table of contents",
                ],
                description="Better organization will make your document easier to navigate and understand.",
            )
        )

    if analysis.compliance_issues:
        suggestions.append(
            ImprovementSuggestion(
                category="Legal Compliance",
                priority="High",
                items=analysis.compliance_issues,
                description="These updates will help ensure your document meets current legal requirements.",
            )
        )

    suggestions.append(
        ImprovementSuggestion(
            category="Enhancements",
            priority="Low",
            items=[
                "Update language for clarity",
                "Add industry-specific best practices",
                "Include implementation guidelines",
                "Add visual formatting improvements",
            ],
            description="These changes will make your document more professional and user-friendly.",
        )
    )

    return suggestions
