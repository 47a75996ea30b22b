"""Static document templates, industry metadata and question lists.

The catalog is configuration, not user data: nothing here is mutated at
runtime. ``field_ids`` defines which answer keys a conversation of a given
document type may collect.
"""

from dataclasses import dataclass

from askapril.core.schemas_copilot import Question, QuestionKind, QuestionOption

# Document type used when an upload does not name one
UPLOAD_DOCUMENT_TYPE = "document-update"


@dataclass(frozen=True)
class DocumentTemplate:
    name: str
    time_estimate: str
    sections: tuple[str, ...]


@dataclass(frozen=True)
class IndustryProfile:
    name: str
    common_challenges: tuple[str, ...]
    regulations: tuple[str, ...]
    key_roles: tuple[str, ...]


DOCUMENT_TEMPLATES: dict[str, DocumentTemplate] = {
    "employee-handbook": DocumentTemplate(
        name="Employee Handbook",
        time_estimate="15-30 mins",
        sections=(
            "Welcome Message",
            "Company Overview",
            "Employment Policies",
            "Workplace Conduct",
            "Benefits and Compensation",
            "Safety and Security",
            "Performance Standards",
            "Progressive Discipline",
            "Employee Resources",
        ),
    ),
    "training-program": DocumentTemplate(
        name="Training Program",
        time_estimate="20-45 mins",
        sections=(
            "Program Overview",
            "Learning Objectives",
            "Training Schedule",
            "Core Competencies",
            "Assessment Methods",
            "Resources and Materials",
            "Progress Tracking",
            "Certification Requirements",
        ),
    ),
    "policy-document": DocumentTemplate(
        name="Policy Document",
        time_estimate="10-20 mins",
        sections=(
            "Policy Statement",
            "Purpose and Scope",
            "Definitions",
            "Procedures",
            "Responsibilities",
            "Compliance Requirements",
            "Enforcement",
            "Review and Updates",
        ),
    ),
    "process-documentation": DocumentTemplate(
        name="Process Documentation",
        time_estimate="15-25 mins",
        sections=(
            "Process Overview",
            "Prerequisites",
            "Step-by-Step Instructions",
            "Quality Checkpoints",
            "Troubleshooting Guide",
            "Best Practices",
            "Common Mistakes",
            "Review and Approval",
        ),
    ),
}

INDUSTRIES: dict[str, IndustryProfile] = {
    "restaurant": IndustryProfile(
        name="Restaurant/Food Service",
        common_challenges=(
            "Food safety compliance",
            "High turnover",
            "Peak hour management",
            "Customer service standards",
        ),
        regulations=(
            "Health department requirements",
            "Food handling certification",
            "Alcohol service laws",
            "Labor regulations",
        ),
        key_roles=("Server", "Cook", "Host/Hostess", "Manager", "Dishwasher", "Bartender"),
    ),
    "retail": IndustryProfile(
        name="Retail",
        common_challenges=(
            "Loss prevention",
            "Seasonal staffing",
            "Customer complaints",
            "Inventory management",
        ),
        regulations=(
            "Consumer protection laws",
            "Return policies",
            "Safety regulations",
            "Labor standards",
        ),
        key_roles=(
            "Sales Associate",
            "Cashier",
            "Stock Associate",
            "Supervisor",
            "Manager",
            "Visual Merchandiser",
        ),
    ),
    "healthcare": IndustryProfile(
        name="Healthcare",
        common_challenges=(
            "HIPAA compliance",
            "Patient satisfaction",
            "Emergency procedures",
            "Staff certification",
        ),
        regulations=(
            "HIPAA privacy rules",
            "OSHA standards",
            "State licensing requirements",
            "Patient rights",
        ),
        key_roles=("Receptionist", "Medical Assistant", "Nurse", "Technician", "Administrator"),
    ),
    "professional-services": IndustryProfile(
        name="Professional Services",
        common_challenges=(
            "Client confidentiality",
            "Project management",
            "Quality assurance",
            "Professional development",
        ),
        regulations=(
            "Professional licensing",
            "Client confidentiality",
            "Data protection",
            "Industry standards",
        ),
        key_roles=(
            "Consultant",
            "Administrator",
            "Project Manager",
            "Analyst",
            "Client Relations",
        ),
    ),
}

TEAM_SIZE_OPTIONS = [
    ("1-5", "1-5 employees"),
    ("6-15", "6-15 employees"),
    ("16-50", "16-50 employees"),
    ("51-100", "51-100 employees"),
    ("100+", "More than 100 employees"),
]

BASIC_QUESTIONS: list[Question] = [
    Question(id="business_name", question="What's your business name?", type=QuestionKind.TEXT, required=True),
    Question(
        id="industry",
        question="What industry are you in?",
        type=QuestionKind.SELECT,
        options=[QuestionOption(value=key, label=profile.name) for key, profile in INDUSTRIES.items()],
        required=True,
    ),
    Question(
        id="team_size",
        question="How many employees do you have?",
        type=QuestionKind.SELECT,
        options=[QuestionOption(value=value, label=label) for value, label in TEAM_SIZE_OPTIONS],
        required=True,
    ),
]

BASIC_FIELD_IDS = [q.id for q in BASIC_QUESTIONS]

TYPE_SPECIFIC_QUESTIONS: dict[str, list[Question]] = {
    "employee-handbook": [
        Question(
            id="current_challenges",
            question="What are your biggest challenges with managing your team?",
            type=QuestionKind.TEXTAREA,
            placeholder="e.g., High turnover, unclear expectations, communication issues...",
        ),
        Question(
            id="company_values",
            question="What are your core company values? (Optional)",
            type=QuestionKind.TEXTAREA,
            placeholder="e.g., Excellent customer service, teamwork, integrity...",
        ),
    ],
    "training-program": [
        Question(
            id="training_role",
            question="What role/position is this training for?",
            type=QuestionKind.TEXT,
            required=True,
        ),
        Question(
            id="key_skills",
            question="What are the most important skills for this role?",
            type=QuestionKind.TEXTAREA,
            placeholder="e.g., Customer service, cash handling, product knowledge...",
        ),
    ],
}

REGULATIONS_FIELD_ID = "specific_regulations"
EXISTING_POLICIES_FIELD_ID = "existing_policies"
IMPROVEMENT_GOALS_FIELD_ID = "improvement_goals"

FOLLOW_UP_FIELD_IDS = [REGULATIONS_FIELD_ID, EXISTING_POLICIES_FIELD_ID]


def is_known_document_type(document_type: str | None) -> bool:
    return document_type in DOCUMENT_TEMPLATES


def available_document_types() -> list[str]:
    return list(DOCUMENT_TEMPLATES)


def get_template(document_type: str) -> DocumentTemplate:
    return DOCUMENT_TEMPLATES[document_type]


def get_industry(industry_key: str | None) -> IndustryProfile | None:
    if not industry_key:
        return None
    return INDUSTRIES.get(industry_key)


def initial_questions(document_type: str) -> list[Question]:
    """Basic questions followed by the type-specific ones."""
    return BASIC_QUESTIONS + TYPE_SPECIFIC_QUESTIONS.get(document_type, [])


def field_ids(document_type: str) -> set[str]:
    """Answer keys a conversation of this document type may collect."""
    ids = set(BASIC_FIELD_IDS) | set(FOLLOW_UP_FIELD_IDS) | {IMPROVEMENT_GOALS_FIELD_ID}
    ids.update(q.id for q in TYPE_SPECIFIC_QUESTIONS.get(document_type, []))
    return ids


def regulations_question(industry: IndustryProfile) -> Question:
    return Question(
        id=REGULATIONS_FIELD_ID,
        question=(
            "Are there any specific regulations or requirements I should include "
            f"for {industry.name}?"
        ),
        type=QuestionKind.TEXTAREA,
        placeholder=f"e.g., {', '.join(industry.regulations[:2])}...",
    )


EXISTING_POLICIES_QUESTION = Question(
    id=EXISTING_POLICIES_FIELD_ID,
    question="Do you have any existing policies or procedures I should incorporate?",
    type=QuestionKind.TEXTAREA,
    placeholder="Describe any current policies you want to keep or modify...",
)
