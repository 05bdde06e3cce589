from supportdesk.replies.domain import Document
from supportdesk.replies.domain.scoring import (
    rank_by_terms,
    score_content_relevance,
    score_document,
    score_documents,
    score_term_presence,
)


def test_keyword_in_name_scores_strictly_higher():
    content = "Refunds take five days."
    named = Document(id="a", name="Refund Policy", content=content)
    unnamed = Document(id="b", name="Policy", content=content)

    assert score_document(named, ["refund"]) == 4.5
    assert score_document(unnamed, ["refund"]) == 1.5


def test_faq_or_help_name_gets_bonus():
    plain = Document(id="a", name="Billing", content="nothing relevant")
    faq = Document(id="b", name="Billing FAQ", content="nothing relevant")
    assert score_document(faq, ["zebra"]) - score_document(plain, ["zebra"]) == 1.5


def test_repeat_bonus_is_capped():
    document = Document(id="a", name="Doc", content="plan " * 10)
    # 1 for presence, +3 capped repeats, +0.5 partial match
    assert score_document(document, ["plan"]) == 4.5


def test_score_documents_is_non_increasing_and_limited(knowledge_base):
    scored = score_documents(knowledge_base, ["refund", "plan", "error"], limit=3)
    assert len(scored) == 3
    scores = [item.score for item in scored]
    assert scores == sorted(scores, reverse=True)


def test_score_documents_keeps_corpus_order_on_ties():
    docs = [Document(id=str(i), name=f"Doc {i}", content="same") for i in range(3)]
    scored = score_documents(docs, ["other"])
    assert [item.document.id for item in scored] == ["0", "1", "2"]


def test_score_term_presence_matches_multi_word_terms_across_whitespace():
    text = "Use password   reset. Password reset links expire. password reset"
    assert score_term_presence(text, ["password reset"]) == 3


def test_score_content_relevance_rewards_early_mentions():
    early = "Refund details: " + "x" * 200
    late = "x" * 200 + " refund details"
    assert score_content_relevance(early, ["refund"]) > score_content_relevance(late, ["refund"])


def test_rank_by_terms_orders_by_term_presence():
    low = Document(id="1", name="a", content="nothing here")
    high = Document(id="2", name="b", content="refund and money back")
    assert rank_by_terms([low, high], ["refund", "money back"]) == [high, low]
