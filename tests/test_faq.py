import pytest

from supportdesk.replies.domain import FAQPair, Query
from supportdesk.replies.domain.faq import (
    extract_best_qa_pair,
    extract_faq_pairs,
    extract_password_reset_pair,
    extract_relevant_pair,
    faq_match_threshold,
    find_best_faq_pair,
    is_faq_structured,
    score_faq_pair,
)


def test_two_pair_content_yields_exactly_two_pairs():
    pairs = extract_faq_pairs("Q: What is X?\nA: X is Y.\nQ: How?\nA: Like this.")

    assert [(p.question, p.answer) for p in pairs] == [
        ("What is X?", "X is Y."),
        ("How?", "Like this."),
    ]
    assert all("Q:" not in p.answer for p in pairs)


def test_question_without_answer_is_skipped():
    pairs = extract_faq_pairs("Q: Orphan question\nQ: Real one?\nA: Yes.")
    assert [(p.question, p.answer) for p in pairs] == [("Real one?", "Yes.")]


def test_answer_before_any_question_is_ignored():
    pairs = extract_faq_pairs("A: stray preamble\nQ: Q1?\nA: A1")
    assert [(p.question, p.answer) for p in pairs] == [("Q1?", "A1")]


def test_second_answer_marker_is_literal_answer_text():
    pairs = extract_faq_pairs("Q: Q1?\nA: first A: second")
    assert pairs[0].answer == "first A: second"


def test_pairs_with_blank_answer_are_dropped():
    pairs = extract_faq_pairs("Q: Q1?\nA:   \nQ: Q2?\nA: ok")
    assert [p.question for p in pairs] == ["Q2?"]


def test_unstructured_content_has_no_pairs():
    assert extract_faq_pairs("Just a paragraph about refunds.") == []


def test_faq_pair_rejects_empty_sides():
    with pytest.raises(ValueError):
        FAQPair(question=" ", answer="answer")


@pytest.mark.parametrize("count, expected", [(0, 1.5), (2, 1.5), (5, 2.0), (10, 3.0)])
def test_threshold_is_floored_and_capped(count, expected):
    assert faq_match_threshold(count) == pytest.approx(expected)


def test_score_faq_pair_counts_coverage_and_phrases():
    # 2 shared keywords, full coverage (x2), one shared phrase
    score = score_faq_pair("Can I reset password?", ["reset", "password"], ["reset password"])
    assert score == pytest.approx(2 + 2 + 1.5)


def test_find_best_faq_pair_for_refund_query(billing_faq):
    query = Query(title="Refund request", description="I want a refund for last month")
    best = find_best_faq_pair([billing_faq], query)

    assert best.answer == "Refunds are processed within 5 business days."
    assert best.source == "Billing FAQ"
    assert best.score == pytest.approx(2 + 2 / 6 * 2)


def test_find_best_faq_pair_without_overlap_is_none(billing_faq):
    query = Query(title="Dark mode", description="please add a dark mode toggle")
    assert find_best_faq_pair([billing_faq], query) is None


def test_extract_relevant_pair_matches_question_keywords(billing_faq):
    pair = extract_relevant_pair(billing_faq.content, ["pricing"])
    assert pair.answer == "Plans start at $9.99/month."
    assert extract_relevant_pair(billing_faq.content, ["shipping"]) is None


def test_extract_password_reset_pair():
    content = "Q: How do I change my email?\nA: Settings.\nQ: I forgot my password\nA: Use the reset link."
    assert extract_password_reset_pair(content).answer == "Use the reset link."


def test_extract_best_qa_pair_requires_minimum_score():
    content = "Q: How to export data?\nA: Use the export button.\nQ: Billing?\nA: Monthly."
    assert extract_best_qa_pair(content, ["export"]).question == "How to export data?"
    assert extract_best_qa_pair(content, ["zzz"]) is None


def test_faq_structure_needs_both_markers(billing_faq):
    assert is_faq_structured(billing_faq.content)
    assert not is_faq_structured("plain")
    assert not is_faq_structured("Q: only a question")
