"""Document synthesis for the co-pilot.

Two paths produce the section list:

- new documents: each template section name maps to a ``SectionTag``; tags
  with a generator interpolate the collected answers and industry metadata,
  every other tag gets the generic body;
- improved uploads: one remediation section per detected gap, in fixed order,
  followed by the enhanced original content and implementation guidelines.

Both paths share the HTML and plain-text renderers.
"""

import html
import re
from datetime import datetime, timezone  # noqa: UP035
from enum import Enum
from typing import Callable

from askapril.core.document_analysis import topic_gap
from askapril.core.logging import get_logger
from askapril.core.question_catalog import IndustryProfile, get_industry, get_template
from askapril.core.schemas_copilot import (
    Conversation,
    DocumentAnalysis,
    DocumentSection,
    GeneratedDocument,
    OriginalDocument,
)

logger = get_logger(__name__)


class SectionTag(str, Enum):
    """Every section name used by the document templates."""

    WELCOME_MESSAGE = "Welcome Message"
    COMPANY_OVERVIEW = "Company Overview"
    EMPLOYMENT_POLICIES = "Employment Policies"
    WORKPLACE_CONDUCT = "Workplace Conduct"
    BENEFITS_AND_COMPENSATION = "Benefits and Compensation"
    SAFETY_AND_SECURITY = "Safety and Security"
    PERFORMANCE_STANDARDS = "Performance Standards"
    PROGRESSIVE_DISCIPLINE = "Progressive Discipline"
    EMPLOYEE_RESOURCES = "Employee Resources"
    PROGRAM_OVERVIEW = "Program Overview"
    LEARNING_OBJECTIVES = "Learning Objectives"
    TRAINING_SCHEDULE = "Training Schedule"
    CORE_COMPETENCIES = "Core Competencies"
    ASSESSMENT_METHODS = "Assessment Methods"
    RESOURCES_AND_MATERIALS = "Resources and Materials"
    PROGRESS_TRACKING = "Progress Tracking"
    CERTIFICATION_REQUIREMENTS = "Certification Requirements"
    POLICY_STATEMENT = "Policy Statement"
    PURPOSE_AND_SCOPE = "Purpose and Scope"
    DEFINITIONS = "Definitions"
    PROCEDURES = "Procedures"
    RESPONSIBILITIES = "Responsibilities"
    COMPLIANCE_REQUIREMENTS = "Compliance Requirements"
    ENFORCEMENT = "Enforcement"
    REVIEW_AND_UPDATES = "Review and Updates"
    PROCESS_OVERVIEW = "Process Overview"
    PREREQUISITES = "Prerequisites"
    STEP_BY_STEP_INSTRUCTIONS = "Step-by-Step Instructions"
    QUALITY_CHECKPOINTS = "Quality Checkpoints"
    TROUBLESHOOTING_GUIDE = "Troubleshooting Guide"
    BEST_PRACTICES = "Best Practices"
    COMMON_MISTAKES = "Common Mistakes"
    REVIEW_AND_APPROVAL = "Review and Approval"
    GENERIC = "Generic"

    @classmethod
    def from_name(cls, section_name: str) -> "SectionTag":
        try:
            return cls(section_name)
        except ValueError:
            return cls.GENERIC


GENERIC_SECTION_BODY = (
    "This section will be customized based on your specific needs and industry requirements."
)

# Team sizes whose lower bound exceeds this get a performance-review policy
PERFORMANCE_REVIEW_TEAM_SIZE = 15

SectionGenerator = Callable[[dict[str, str], IndustryProfile | None], str]


# ============================================================================
# New-document section generators
# ============================================================================


def _welcome_message(info: dict[str, str], industry: IndustryProfile | None) -> str:
    return (
        f"Welcome to {info.get('business_name', '')}! We're excited to have you join our team. "
        "This handbook will guide you through our policies, procedures, and expectations "
        "to help you succeed in your role."
    )


def _company_overview(info: dict[str, str], industry: IndustryProfile | None) -> str:
    industry_name = industry.name if industry else "business"
    values = info.get("company_values")
    values_text = (
        f"Our core values include: {values}"
        if values
        else "We believe in teamwork, excellence, and continuous improvement."
    )
    return (
        f"{info.get('business_name', '')} is a {industry_name} dedicated to providing "
        f"excellent service to our customers. {values_text}"
    )


def team_size_lower_bound(team_size: str | None) -> int | None:
    """Leading integer of a team-size option such as ``16-50`` or ``100+``."""
    if not team_size:
        return None
    match = re.match(r"\s*(\d+)", team_size.split("-")[0])
    return int(match.group(1)) if match else None


def _employment_policies(info: dict[str, str], industry: IndustryProfile | None) -> str:
    policies = (
        "\n## Equal Opportunity Employment\n"
        f"{info.get('business_name', '')} is an equal opportunity employer committed to "
        "creating an inclusive environment for all employees.\n\n"
        "## Work Schedule\n"
        "Work schedules will be provided in advance and may vary based on business needs."
    )

    lower_bound = team_size_lower_bound(info.get("team_size"))
    if lower_bound is not None and lower_bound > PERFORMANCE_REVIEW_TEAM_SIZE:
        policies += (
            "\n\n## Performance Reviews\n"
            "Regular performance evaluations will be conducted to support your "
            "professional development."
        )

    return policies


def _workplace_conduct(info: dict[str, str], industry: IndustryProfile | None) -> str:
    conduct = (
        "\n## Professional Behavior\n"
        "All employees are expected to maintain professional conduct that reflects "
        f"positively on {info.get('business_name', '')}.\n\n"
        "## Communication\n"
        "Clear, respectful communication is essential for our team's success."
    )

    if industry:
        conduct += (
            "\n\n## Industry-Specific Standards\n"
            f"Given our work in {industry.name}, special attention should be paid to: "
            f"{', '.join(industry.common_challenges[:2])}."
        )

    return conduct


def _safety_and_security(info: dict[str, str], industry: IndustryProfile | None) -> str:
    safety = (
        "\n## General Safety\n"
        "The safety of our employees and customers is our top priority at "
        f"{info.get('business_name', '')}.\n\n"
        "## Emergency Procedures\n"
        "All employees should be familiar with emergency exits and procedures."
    )

    if industry:
        safety += (
            "\n\n## Regulatory Compliance\n"
            "We must comply with all relevant regulations including: "
            f"{', '.join(industry.regulations[:2])}."
        )

    return safety


def _generic_section(info: dict[str, str], industry: IndustryProfile | None) -> str:
    return GENERIC_SECTION_BODY


SECTION_GENERATORS: dict[SectionTag, SectionGenerator] = {
    SectionTag.WELCOME_MESSAGE: _welcome_message,
    SectionTag.COMPANY_OVERVIEW: _company_overview,
    SectionTag.EMPLOYMENT_POLICIES: _employment_policies,
    SectionTag.WORKPLACE_CONDUCT: _workplace_conduct,
    SectionTag.SAFETY_AND_SECURITY: _safety_and_security,
}


def build_new_document_sections(conversation: Conversation) -> list[DocumentSection]:
    info = conversation.collected_info
    industry = get_industry(info.get("industry"))
    template = get_template(conversation.document_type)

    sections = []
    for section_name in template.sections:
        generator = SECTION_GENERATORS.get(SectionTag.from_name(section_name), _generic_section)
        sections.append(DocumentSection(title=section_name, content=generator(info, industry)))
    return sections


# ============================================================================
# Improvement sections
# ============================================================================

# (gap topic, section title, remediation body), in emission order
REMEDIATIONS: list[tuple[str, str, str]] = [
    (
        "equal opportunity",
        "Equal Opportunity Employment",
        "We are an equal opportunity employer committed to creating an inclusive environment "
        "for all employees. We do not discriminate based on race, religion, color, national "
        "origin, gender, sexual orientation, age, marital status, veteran status, or "
        "disability status.",
    ),
    (
        "safety",
        "Workplace Safety",
        "The safety of our employees and customers is our top priority. All employees must "
        "follow safety protocols, report hazards immediately, and participate in safety "
        "training programs. Emergency procedures are posted throughout the workplace.",
    ),
    (
        "attendance",
        "Attendance and Punctuality",
        "Regular attendance and punctuality are essential for business operations. Employees "
        "are expected to arrive on time and ready to work. Excessive absences or tardiness "
        "may result in disciplinary action.",
    ),
    (
        "dress code",
        "Dress Code and Appearance",
        "Employees are expected to maintain a professional appearance appropriate for their "
        "role and our business environment. Specific dress code requirements will be "
        "provided during orientation.",
    ),
    (
        "performance",
        "Performance Standards and Reviews",
        "We believe in supporting employee growth through regular feedback and performance "
        "reviews. Performance expectations will be clearly communicated, and employees will "
        "receive ongoing coaching and development opportunities.",
    ),
]

ORIGINAL_EXCERPT_CHARS = 500

IMPLEMENTATION_GUIDELINES = (
    "To successfully implement this updated document:\n\n"
    "• Review all sections with your management team\n"
    "• Customize any sections to fit your specific needs\n"
    "• Have the document reviewed by legal counsel\n"
    "• Communicate changes to all employees\n"
    "• Provide training on new policies\n"
    "• Set a regular review schedule for updates"
)

IMPROVEMENTS_APPLIED = [
    "Updated formatting and structure",
    "Added missing policy sections",
    "Enhanced legal compliance language",
    "Improved readability and clarity",
    "Added industry-specific best practices",
]


def build_improved_sections(original: OriginalDocument) -> list[DocumentSection]:
    gaps = set(original.analysis.gaps)
    sections = [
        DocumentSection(title=title, content=body)
        for topic, title, body in REMEDIATIONS
        if topic_gap(topic) in gaps
    ]

    sections.append(
        DocumentSection(
            title="Enhanced Original Content",
            content=(
                "The following sections have been updated and improved from your original "
                "document:\n\n"
                f"{original.content[:ORIGINAL_EXCERPT_CHARS]}...\n\n"
                "[Content has been reformatted and enhanced for clarity and compliance]"
            ),
        )
    )
    sections.append(DocumentSection(title="Implementation Guidelines", content=IMPLEMENTATION_GUIDELINES))
    return sections


# ============================================================================
# Renditions
# ============================================================================

HTML_STYLE = """
        body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; margin: 40px; color: #333; }
        h1 { color: #000; border-bottom: 3px solid #FFD700; padding-bottom: 10px; }
        h2 { color: #333; margin-top: 30px; }
        h3 { color: #666; }
        .header { text-align: center; margin-bottom: 40px; }
        .section { margin-bottom: 30px; padding: 20px; border-left: 4px solid #FFD700; background: #fafafa; }
        .improvement-badge { background: #e8f5e8; color: #2d6e2d; padding: 4px 8px; border-radius: 4px; font-size: 0.8rem; margin-left: 10px; }
        .analysis-summary { background: #f0f8ff; padding: 20px; border-radius: 8px; margin-bottom: 30px; border: 1px solid #b3d9ff; }
        .improvements-list { background: #fff9e6; padding: 15px; border-radius: 6px; margin: 15px 0; }
        .footer { margin-top: 40px; text-align: center; font-size: 12px; color: #999; }
"""

LEGAL_REVIEW_NOTE = "This document should be reviewed by legal counsel before implementation"


def format_generated_date(created_at: datetime) -> str:
    return f"{created_at.month}/{created_at.day}/{created_at.year}"


def _analysis_summary_line(analysis: DocumentAnalysis) -> str:
    return (
        f"Found {len(analysis.strengths)} strengths and "
        f"{len(analysis.gaps)} areas for improvement"
    )


def render_html(document: GeneratedDocument) -> str:
    title = html.escape(document.title, quote=False)
    improved = document.analysis_results is not None

    parts = [
        "<!DOCTYPE html>",
        '<html lang="en">',
        "<head>",
        '    <meta charset="UTF-8">',
        '    <meta name="viewport" content="width=device-width, initial-scale=1.0">',
        f"    <title>{title}</title>",
        f"    <style>{HTML_STYLE}    </style>",
        "</head>",
        "<body>",
        '    <div class="header">',
        f"        <h1>{title}</h1>",
        f"        <p>Generated on {format_generated_date(document.created_at)}</p>",
    ]
    if improved:
        parts.append('        <span class="improvement-badge">AI-Improved Document</span>')
    parts.append("    </div>")

    if improved:
        parts.extend(
            [
                '    <div class="analysis-summary">',
                "        <h3>Document Analysis Summary</h3>",
                f"        <p><strong>Original file:</strong> {html.escape(document.original_filename or '', quote=False)}</p>",
                f"        <p><strong>Analysis results:</strong> {_analysis_summary_line(document.analysis_results)}</p>",
                '        <div class="improvements-list">',
                "            <h4>Key Improvements Made:</h4>",
                "            <ul>",
            ]
        )
        parts.extend(f"                <li>{html.escape(item, quote=False)}</li>" for item in document.improvements)
        parts.extend(["            </ul>", "        </div>", "    </div>"])

    for section in document.sections:
        body = html.escape(section.content, quote=False).replace("\n", "<br>")
        parts.extend(
            [
                '    <div class="section">',
                f"        <h2>{html.escape(section.title, quote=False)}</h2>",
                f"        <div>{body}</div>",
                "    </div>",
            ]
        )

    verb = "improved" if improved else "created"
    parts.extend(
        [
            '    <div class="footer">',
            f"        <p>Document {verb} with Ask April AI Co-Pilot</p>",
            f"        <p>{LEGAL_REVIEW_NOTE}</p>",
            "    </div>",
            "</body>",
            "</html>",
        ]
    )
    return "\n".join(parts) + "\n"


def render_text(document: GeneratedDocument) -> str:
    improved = document.analysis_results is not None

    text = f"{document.title}\n{'=' * len(document.title)}\n\n"
    text += f"Generated on {format_generated_date(document.created_at)}\n"

    if improved:
        text += "AI-IMPROVED DOCUMENT\n\n"
        text += "DOCUMENT ANALYSIS SUMMARY\n"
        text += f"{'=' * 25}\n"
        text += f"Original file: {document.original_filename}\n"
        text += f"Analysis results: {_analysis_summary_line(document.analysis_results)}\n\n"
        text += "KEY IMPROVEMENTS MADE:\n"
        for index, improvement in enumerate(document.improvements, start=1):
            text += f"{index}. {improvement}\n"

    text += "\n"

    for section in document.sections:
        text += f"{section.title}\n{'-' * len(section.title)}\n"
        text += f"{section.content}\n\n"

    verb = "improved" if improved else "created"
    text += f"\nDocument {verb} with Ask April AI Co-Pilot\n"
    text += f"{LEGAL_REVIEW_NOTE}\n"
    return text


# ============================================================================
# Entry point
# ============================================================================


def synthesize(conversation: Conversation, created_at: datetime | None = None) -> GeneratedDocument:
    """
    Build the document for a conversation.

    Uses the improvement path when the conversation started from an upload,
    otherwise the template path for its document type.

    Args:
        conversation: Conversation with collected answers (and upload, if any)
        created_at: Generation timestamp (defaults to now, UTC)

    Returns:
        GeneratedDocument with sections and both renditions
    """
    created_at = created_at or datetime.now(timezone.utc)  # noqa: UP017
    original = conversation.original_document

    if original is not None:
        document = GeneratedDocument(
            title=f"{original.filename} - Improved Version",
            sections=build_improved_sections(original),
            html_content="",
            text_content="",
            created_at=created_at,
            original_filename=original.filename,
            improvements=list(IMPROVEMENTS_APPLIED),
            analysis_results=original.analysis,
        )
    else:
        template = get_template(conversation.document_type)
        info = conversation.collected_info
        document = GeneratedDocument(
            title=f"{info.get('business_name', '')} - {template.name}",
            sections=build_new_document_sections(conversation),
            html_content="",
            text_content="",
            created_at=created_at,
            business_info=dict(info),
        )

    document.html_content = render_html(document)
    document.text_content = render_text(document)

    logger.debug(
        f"Synthesized '{document.title}' with {len(document.sections)} sections",
        extra={"conversation_id": conversation.id},
    )
    return document
