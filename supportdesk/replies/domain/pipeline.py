"""
Reply Pipeline
==============

Deterministic reply assembly for one query over a candidate pool:

    FAQ_EXTRACT_AND_SCORE -> FAQ_MATCH (score >= threshold)
                          -> CLASSIFY_INTENT -> topic branch | GENERAL
    -> DEDUPLICATE_CONTEXT -> COMPOSE

No retries and no cycles; every path ends in composition.
"""

from typing import Sequence

from supportdesk.replies.domain.composer import compose_canned_reply, compose_reply
from supportdesk.replies.domain.context import pick_supplement
from supportdesk.replies.domain.entities import (
    Document, IntentCategory, Query, Reply, ReplyBranch
)
from supportdesk.replies.domain.faq import (
    extract_best_qa_pair,
    extract_password_reset_pair,
    extract_relevant_pair,
    faq_match_threshold,
    find_best_faq_pair,
)
from supportdesk.replies.domain.intent import (
    BRANCH_PROFILES,
    PASSWORD_RESET_RANK_TERMS,
    classify_intent,
    select_password_reset_documents,
)
from supportdesk.replies.domain.scoring import (
    find_fallback_document,
    rank_by_relevance,
    rank_by_terms,
)

INTENT_BRANCHES = {
    IntentCategory.SUBSCRIPTION: ReplyBranch.SUBSCRIPTION,
    IntentCategory.TECHNICAL: ReplyBranch.TECHNICAL,
    IntentCategory.ACCOUNT: ReplyBranch.ACCOUNT,
    IntentCategory.REFUND: ReplyBranch.REFUND,
    IntentCategory.FEATURE: ReplyBranch.FEATURE,
}


def assemble_reply(query: Query, candidates: Sequence[Document]) -> Reply:
    """Build the reply for ``query`` from the ranked candidate pool."""
    candidates = list(candidates)
    threshold = faq_match_threshold(len(query.keywords))

    best_pair = find_best_faq_pair(candidates, query)
    faq_score = best_pair.score if best_pair else 0.0

    if best_pair and best_pair.score >= threshold:
        supplement = pick_supplement(candidates, best_pair.answer)
        return Reply(
            text=compose_reply(
                ReplyBranch.FAQ, query.customer_name, query.display_title,
                best_pair.answer, supplement
            ),
            branch=ReplyBranch.FAQ,
            primary_content=best_pair.answer,
            supplement=supplement,
            faq_score=faq_score,
            faq_threshold=threshold,
        )

    classification = classify_intent(query.text_lower)
    intent = classification.primary

    if intent is IntentCategory.NONE:
        reply = _general_reply(query, candidates)
    elif classification.password_reset:
        reply = _password_reset_reply(query, candidates)
    else:
        reply = _intent_reply(query, candidates, intent)

    reply.intent = intent
    reply.faq_score = faq_score
    reply.faq_threshold = threshold
    return reply


def _canned(query: Query, branch: ReplyBranch) -> Reply:
    return Reply(
        text=compose_canned_reply(branch, query.customer_name, query.display_title),
        branch=branch,
    )


def _intent_reply(query: Query, candidates: Sequence[Document], intent: IntentCategory) -> Reply:
    branch = INTENT_BRANCHES[intent]
    profile = BRANCH_PROFILES[intent]

    pool = profile.select(candidates)
    if not pool:
        return _canned(query, branch)

    ranked = rank_by_terms(pool, profile.rank_terms)
    primary_document = ranked[0]

    pair = extract_relevant_pair(primary_document.content, query.keywords)
    primary = pair.as_excerpt() if pair else primary_document.content

    dedupe_text = primary if profile.dedupe_on_excerpt else primary_document.content
    supplement = pick_supplement(ranked, dedupe_text)

    return Reply(
        text=compose_reply(branch, query.customer_name, query.display_title, primary, supplement),
        branch=branch,
        primary_content=primary,
        supplement=supplement,
    )


def _password_reset_reply(query: Query, candidates: Sequence[Document]) -> Reply:
    branch = ReplyBranch.PASSWORD_RESET

    pool = select_password_reset_documents(candidates)
    if not pool:
        return _canned(query, branch)

    ranked = rank_by_terms(pool, PASSWORD_RESET_RANK_TERMS)
    primary_document = ranked[0]

    pair = extract_password_reset_pair(primary_document.content)
    instructions = pair.answer if pair else primary_document.content
    supplement = pick_supplement(ranked, instructions)

    return Reply(
        text=compose_reply(branch, query.customer_name, query.display_title, instructions, supplement),
        branch=branch,
        primary_content=instructions,
        supplement=supplement,
    )


def _general_reply(query: Query, candidates: Sequence[Document]) -> Reply:
    branch = ReplyBranch.GENERAL
    if not candidates:
        return _canned(query, branch)

    ranked = rank_by_relevance(candidates, query.keywords)
    most_relevant = ranked[0]

    pair = extract_best_qa_pair(most_relevant.content, query.keywords)
    primary = pair.as_excerpt() if pair else most_relevant.content
    supplement = pick_supplement(ranked, most_relevant.content)

    return Reply(
        text=compose_reply(branch, query.customer_name, query.display_title, primary, supplement),
        branch=branch,
        primary_content=primary,
        supplement=supplement,
    )


def compose_acknowledgement(query: Query, documents: Sequence[Document] = ()) -> Reply:
    """
    Holding reply for when the normal pipeline cannot produce one.

    Quotes the best coarse keyword match from ``documents`` when there is
    one; otherwise sends the plain acknowledgement.
    """
    branch = ReplyBranch.ACKNOWLEDGEMENT
    document = find_fallback_document(documents, query.text_lower)
    if document is None:
        return _canned(query, branch)

    return Reply(
        text=compose_reply(branch, query.customer_name, query.display_title, document.content),
        branch=branch,
        primary_content=document.content,
    )
