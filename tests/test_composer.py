from supportdesk.replies.domain import ReplyBranch
from supportdesk.replies.domain.composer import (
    DEFAULT_SUPPLEMENT_HEADING,
    SIGNATURE,
    compose_canned_reply,
    compose_reply,
)


def test_faq_reply_layout():
    text = compose_reply(ReplyBranch.FAQ, "Alex", "Refund request", "Refunds take 5 days.")
    paragraphs = text.split("\n\n")

    assert paragraphs[0] == "Dear Alex,"
    assert '"Refund request"' in paragraphs[1]
    assert paragraphs[2] == "Refunds take 5 days."
    assert text.endswith(SIGNATURE)
    assert DEFAULT_SUPPLEMENT_HEADING not in text


def test_supplement_gets_heading():
    text = compose_reply(ReplyBranch.GENERAL, "Alex", "Export", "Use the export button.", "Exports are CSV.")
    assert f"{DEFAULT_SUPPLEMENT_HEADING}\n\nExports are CSV." in text


def test_technical_reply_has_lead_in_and_own_heading():
    text = compose_reply(ReplyBranch.TECHNICAL, "Alex", "Sync error", "Clear the cache.", "Sign out and in.")
    assert "Based on our documentation:\n\nClear the cache." in text
    assert "troubleshooting steps helpful:\n\nSign out and in." in text


def test_canned_general_reply_asks_for_details():
    text = compose_canned_reply(ReplyBranch.GENERAL, "Customer", "Dark mode")
    assert text.startswith("Dear Customer,")
    assert "additional details" in text
    assert text.endswith(SIGNATURE)


def test_canned_feature_reply_has_no_closing_paragraph():
    text = compose_canned_reply(ReplyBranch.FEATURE, "Customer", "Dark mode")
    paragraphs = text.split("\n\n")
    assert paragraphs[1].startswith("Thank you for your inquiry about features related to")
    assert paragraphs[-2].startswith("To better assist you with your specific feature request")


def test_canned_subscription_reply_uses_branch_closing():
    text = compose_canned_reply(ReplyBranch.SUBSCRIPTION, "Customer", "Plans")
    assert "account dashboard" in text
    assert "specific questions about our plans" in text


def test_title_with_braces_is_quoted_verbatim():
    text = compose_reply(ReplyBranch.FAQ, "Alex", "Error {code}", "Answer")
    assert '"Error {code}"' in text
