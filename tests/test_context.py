from supportdesk.replies.domain import Document
from supportdesk.replies.domain.context import (
    extract_relevant_snippet,
    pick_supplement,
    text_similarity,
)

PRIMARY = "Refunds are processed within five business days"


def test_text_similarity_of_empty_text_is_zero():
    assert text_similarity("", PRIMARY) == 0.0
    assert text_similarity(PRIMARY, "a an") == 0.0


def test_text_similarity_uses_longer_word_list():
    similarity = text_similarity(PRIMARY + " of approval", PRIMARY)
    assert round(similarity, 3) == 0.857


def test_single_candidate_has_no_supplement():
    assert pick_supplement([Document(id="1", name="a", content=PRIMARY)], PRIMARY) == ""


def test_near_duplicate_candidate_is_skipped():
    candidates = [
        Document(id="1", name="a", content=PRIMARY),
        Document(id="2", name="b", content=PRIMARY + " of approval"),
    ]
    assert pick_supplement(candidates, PRIMARY) == ""


def test_first_distinct_candidate_is_used():
    candidates = [
        Document(id="1", name="a", content=PRIMARY),
        Document(id="2", name="b", content=PRIMARY + " of approval"),
        Document(id="3", name="c", content="Contact billing support by phone."),
    ]
    assert pick_supplement(candidates, PRIMARY) == "Contact billing support by phone."


def test_supplement_never_exceeds_similarity_limit():
    candidates = [
        Document(id="1", name="a", content="Unrelated intro text"),
        Document(id="2", name="b", content=PRIMARY),
        Document(id="3", name="c", content="Shipping takes two weeks."),
    ]
    supplement = pick_supplement(candidates, PRIMARY)
    assert supplement == "Unrelated intro text"
    assert text_similarity(supplement, PRIMARY) <= 0.7


def test_long_text_is_truncated():
    text = "word " * 60
    snippet = extract_relevant_snippet(text, PRIMARY)
    assert snippet == text[:150] + "..."


def test_long_faq_text_yields_a_non_duplicate_pair():
    text = (
        "Q: How long do refunds take?\nA: " + PRIMARY + ".\n"
        "Q: Can I pay by invoice?\nA: Yes, invoices are available on the Business plan "
        "for annual subscriptions paid by bank transfer within thirty days."
    )
    assert len(text) >= 200
    snippet = extract_relevant_snippet(text, PRIMARY)
    assert snippet.startswith("Can I pay by invoice?\nYes, invoices")
