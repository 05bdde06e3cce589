import pytest

from supportdesk.core import InvalidQueryException
from supportdesk.replies.domain import (
    Document,
    IntentCategory,
    Query,
    ReplyBranch,
    assemble_reply,
    compose_acknowledgement,
)


def test_billing_faq_scenario(billing_faq):
    query = Query(title="Refund request", description="I want a refund for last month")
    reply = assemble_reply(query, [billing_faq])

    assert reply.branch is ReplyBranch.FAQ
    assert "Refunds are processed within 5 business days." in reply.text
    assert reply.faq_threshold == pytest.approx(2.4)
    assert reply.faq_score >= reply.faq_threshold


def test_empty_corpus_dark_mode_scenario():
    query = Query(title="Dark mode", description="please add a dark mode toggle")
    reply = assemble_reply(query, [])

    assert reply.branch is ReplyBranch.GENERAL
    assert reply.intent is IntentCategory.NONE
    assert "additional details" in reply.text


def test_subscription_branch_quotes_plan_document(knowledge_base):
    query = Query(title="Upgrade", description="How do I upgrade my subscription?")
    reply = assemble_reply(query, knowledge_base[1:2])

    assert reply.branch is ReplyBranch.SUBSCRIPTION
    assert "Basic and Pro" in reply.text
    assert reply.text.startswith("Dear Customer,")


def test_topic_branch_without_matching_documents_is_canned():
    query = Query(title="Saving fails", description="I get an error when saving")
    reply = assemble_reply(query, [])

    assert reply.branch is ReplyBranch.TECHNICAL
    assert "What specific error messages are you seeing?" in reply.text


def test_password_reset_branch(knowledge_base):
    query = Query(title="Password", description="I forgot my password and need to reset it")
    reply = assemble_reply(query, [knowledge_base[3]])

    assert reply.branch is ReplyBranch.PASSWORD_RESET
    assert reply.intent is IntentCategory.ACCOUNT
    assert "choose Forgot Password" in reply.text


LOGIN_FAQ = Document(
    id="1",
    name="Login",
    content="Q: Where is the password reset page?\nA: Open login and choose Forgot Password.",
)


def test_close_faq_question_is_answered_directly():
    query = Query(title="", description="I forgot my password, please reset it")
    reply = assemble_reply(query, [LOGIN_FAQ])

    assert reply.branch is ReplyBranch.FAQ
    assert reply.primary_content == "Open login and choose Forgot Password."
    assert "Where is the password reset page?" not in reply.text


def test_password_reset_branch_quotes_only_the_answer():
    # Long query raises the FAQ threshold to its cap of 3
    query = Query(
        title="",
        description="I forgot my password yesterday evening after travelling abroad, please reset it",
    )
    reply = assemble_reply(query, [LOGIN_FAQ])

    assert reply.faq_threshold == 3
    assert reply.branch is ReplyBranch.PASSWORD_RESET
    assert reply.primary_content == "Open login and choose Forgot Password."
    assert "Where is the password reset page?" not in reply.text


def test_general_branch_quotes_best_pair():
    document = Document(
        id="1",
        name="Exports",
        content="Q: How to export data?\nA: Use the export button.\nQ: Billing?\nA: Monthly.",
    )
    query = Query(
        title="Spreadsheet",
        description="export everything into a spreadsheet for quarterly finance reporting",
    )
    reply = assemble_reply(query, [document])

    assert reply.branch is ReplyBranch.GENERAL
    assert "How to export data?\n\nUse the export button." in reply.text


def test_supplement_never_duplicates_primary(knowledge_base):
    duplicate = Document(id="9", name="Plans copy", content=knowledge_base[1].content)
    query = Query(title="Upgrade", description="How do I upgrade my subscription?")
    reply = assemble_reply(query, [knowledge_base[1], duplicate])

    assert reply.branch is ReplyBranch.SUBSCRIPTION
    assert reply.supplement == ""


def test_blank_title_is_shown_as_your_inquiry():
    query = Query(title="  ", description="please add a dark mode toggle")
    reply = assemble_reply(query, [])
    assert '"your inquiry"' in reply.text


def test_acknowledgement():
    reply = compose_acknowledgement(Query(title="Help", description="", customer_name="Sam"))
    assert reply.branch is ReplyBranch.ACKNOWLEDGEMENT
    assert reply.text.startswith("Dear Sam,")
    assert '"Help"' in reply.text
    assert "While we prepare" not in reply.text


def test_acknowledgement_quotes_best_keyword_match(knowledge_base):
    query = Query(title="Password trouble", description="cannot reset my password")
    reply = compose_acknowledgement(query, knowledge_base)

    assert reply.branch is ReplyBranch.ACKNOWLEDGEMENT
    assert reply.primary_content == knowledge_base[3].content
    assert "While we prepare a more detailed response, you might find the following " \
        "information helpful:\n\n" + knowledge_base[3].content in reply.text


def test_acknowledgement_without_match_is_plain(knowledge_base):
    reply = compose_acknowledgement(Query(title="Zebra", description="xylophone"), knowledge_base)

    assert reply.primary_content == ""
    assert "While we prepare" not in reply.text


@pytest.mark.parametrize("title, description", [("", ""), ("  ", "\n\t"), (None, None)])
def test_blank_query_is_invalid(title, description):
    with pytest.raises(InvalidQueryException):
        Query(title=title, description=description)


def test_query_defaults():
    query = Query(title="Hi", description="there", customer_name="  ")
    assert query.customer_name == "Customer"
    assert query.ticket_status == "Open"
    assert query.ticket_priority == "Medium"
