"""Tests for co-pilot document synthesis and renditions."""

from datetime import datetime, timezone

import pytest

from askapril.core.document_synthesizer import (
    GENERIC_SECTION_BODY,
    SectionTag,
    synthesize,
    team_size_lower_bound,
)
from askapril.core.schemas_copilot import (
    Conversation,
    DocumentAnalysis,
    OriginalDocument,
    Stage,
)

CREATED_AT = datetime(2024, 3, 5, 12, 0, tzinfo=timezone.utc)


def _conversation(document_type="employee-handbook", original=None, **info):
    return Conversation(
        id="conv-1",
        document_type=document_type,
        stage=Stage.GENERATING_DOCUMENT,
        collected_info=info,
        original_document=original,
        created_at=CREATED_AT,
        updated_at=CREATED_AT,
    )


def _original(gaps, content="Original handbook text. " * 40):
    return OriginalDocument(
        filename="handbook.docx",
        content=content,
        analysis=DocumentAnalysis(word_count=120, strengths=["Contains benefits policies"], gaps=gaps),
    )


class TestNewDocument:
    def test_handbook_sections_and_title(self):
        document = synthesize(
            _conversation(business_name="Acme Diner", industry="restaurant", team_size="6-15"),
            created_at=CREATED_AT,
        )

        assert document.title == "Acme Diner - Employee Handbook"
        assert [s.title for s in document.sections][:3] == [
            "Welcome Message",
            "Company Overview",
            "Employment Policies",
        ]
        assert len(document.sections) == 9
        assert document.sections[0].content.startswith("Welcome to Acme Diner!")
        assert "Restaurant/Food Service" in document.sections[1].content
        assert "Performance Reviews" not in document.sections[2].content
        assert document.sections[4].content == GENERIC_SECTION_BODY

    def test_performance_reviews_for_larger_teams(self):
        document = synthesize(
            _conversation(business_name="Acme", industry="retail", team_size="16-50"),
            created_at=CREATED_AT,
        )
        employment = next(s for s in document.sections if s.title == "Employment Policies")
        assert "## Performance Reviews" in employment.content

    def test_company_values_interpolated(self):
        document = synthesize(
            _conversation(business_name="Acme", company_values="Integrity first"),
            created_at=CREATED_AT,
        )
        assert "Our core values include: Integrity first" in document.sections[1].content

    def test_unknown_industry_omits_industry_paragraphs(self):
        document = synthesize(
            _conversation(business_name="Acme", industry="aerospace"),
            created_at=CREATED_AT,
        )
        conduct = next(s for s in document.sections if s.title == "Workplace Conduct")
        assert "Industry-Specific Standards" not in conduct.content
        assert "is a business dedicated" in document.sections[1].content

    def test_training_program_uses_generic_sections(self):
        document = synthesize(_conversation("training-program", business_name="Acme"), created_at=CREATED_AT)

        assert document.title == "Acme - Training Program"
        assert all(s.content == GENERIC_SECTION_BODY for s in document.sections)

    def test_renditions(self):
        document = synthesize(
            _conversation(business_name="Ben & Jerry", industry="retail", team_size="1-5"),
            created_at=CREATED_AT,
        )

        assert "<h1>Ben &amp; Jerry - Employee Handbook</h1>" in document.html_content
        assert "Generated on 3/5/2024" in document.html_content
        assert document.html_content.count('<div class="section">') == 9
        assert "<br>" in document.html_content
        assert "Document created with Ask April AI Co-Pilot" in document.html_content

        title = "Ben & Jerry - Employee Handbook"
        assert document.text_content.startswith(f"{title}\n{'=' * len(title)}\n")
        assert "Welcome Message\n---------------\n" in document.text_content

    def test_html_keeps_apostrophes_in_text(self):
        document = synthesize(
            _conversation(business_name="Joe's Diner", industry="restaurant"),
            created_at=CREATED_AT,
        )

        assert "<h1>Joe's Diner - Employee Handbook</h1>" in document.html_content
        assert "Welcome to Joe's Diner!" in document.html_content
        assert "&#x27;" not in document.html_content

    def test_deterministic_for_fixed_timestamp(self):
        conversation = _conversation(business_name="Acme", industry="healthcare", team_size="100+")
        assert synthesize(conversation, CREATED_AT) == synthesize(conversation, CREATED_AT)


class TestImprovedDocument:
    @pytest.mark.parametrize(
        "gaps,expected",
        [
            ([], []),
            (["Missing safety policies"], ["Workplace Safety"]),
            (
                [
                    "Missing performance policies",
                    "Missing dress code policies",
                    "Missing benefits policies",
                    "Missing equal opportunity policies",
                ],
                [
                    "Equal Opportunity Employment",
                    "Dress Code and Appearance",
                    "Performance Standards and Reviews",
                ],
            ),
        ],
    )
    def test_one_remediation_per_gap_in_fixed_order(self, gaps, expected):
        document = synthesize(_conversation(original=_original(gaps)), created_at=CREATED_AT)

        assert [s.title for s in document.sections] == expected + [
            "Enhanced Original Content",
            "Implementation Guidelines",
        ]

    def test_improved_header_and_excerpt(self):
        content = "x" * 600
        document = synthesize(
            _conversation(original=_original(["Missing safety policies"], content=content)),
            created_at=CREATED_AT,
        )

        assert document.title == "handbook.docx - Improved Version"
        assert document.original_filename == "handbook.docx"
        assert len(document.improvements) == 5
        excerpt = document.sections[-2].content
        assert "x" * 500 + "..." in excerpt
        assert "x" * 501 not in excerpt
        assert "AI-Improved Document" in document.html_content
        assert "Found 1 strengths and 1 areas for improvement" in document.text_content
        assert "Document improved with Ask April AI Co-Pilot" in document.text_content


@pytest.mark.parametrize(
    "team_size,expected",
    [("1-5", 1), ("16-50", 16), ("100+", 100), ("", None), (None, None), ("many", None)],
)
def test_team_size_lower_bound(team_size, expected):
    assert team_size_lower_bound(team_size) == expected


def test_section_tag_falls_back_to_generic():
    assert SectionTag.from_name("Welcome Message") is SectionTag.WELCOME_MESSAGE
    assert SectionTag.from_name("Appendix") is SectionTag.GENERIC
