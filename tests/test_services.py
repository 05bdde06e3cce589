import asyncio

import pytest

from supportdesk.core import InvalidQueryException, LLMException, RepositoryException, VectorStoreException
from supportdesk.replies.application import (
    IDocumentStore,
    IGenerativeBackend,
    IReplyRecorder,
    IVectorIndex,
    ReplyService,
    ReplySource,
)
from supportdesk.replies.infrastructure import InMemoryDocumentStore


class FakeBackend(IGenerativeBackend):
    def __init__(self, answer=None, error=None, delay=0.0):
        self.answer = answer
        self.error = error
        self.delay = delay
        self.prompts = []

    async def connect(self):
        pass

    async def close(self):
        pass

    async def try_generate(self, prompt, temperature, max_tokens):
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.answer


class FailingStore(IDocumentStore):
    async def list_all(self):
        raise RepositoryException("database down")


class FakeIndex(IVectorIndex):
    def __init__(self, documents=None, error=None):
        self.documents = documents or []
        self.error = error

    async def similarity_search(self, query, k):
        if self.error:
            raise self.error
        return self.documents[:k]


class FakeRecorder(IReplyRecorder):
    def __init__(self, error=None):
        self.records = []
        self.error = error

    async def record(self, ticket_id, reply):
        if self.error:
            raise self.error
        self.records.append((ticket_id, reply))


REFUND = {"title": "Refund request", "description": "I want a refund for last month"}


def test_keyword_pipeline_answers_billing_faq(billing_faq):
    service = ReplyService(InMemoryDocumentStore([billing_faq]))
    result = asyncio.run(service.generate_reply(**REFUND))

    assert result.source == ReplySource.KEYWORD
    assert result.branch == "faq"
    assert "Refunds are processed within 5 business days." in result.reply_text


def test_empty_corpus_still_replies():
    service = ReplyService(InMemoryDocumentStore())
    result = asyncio.run(service.generate_reply("Dark mode", "please add a dark mode toggle"))

    assert result.branch == "general"
    assert result.reply_text


@pytest.mark.parametrize("title, description", [("", ""), ("  ", None), (None, "\n")])
def test_blank_query_raises(title, description):
    service = ReplyService(InMemoryDocumentStore())
    with pytest.raises(InvalidQueryException):
        asyncio.run(service.generate_reply(title, description))


def test_generative_answer_short_circuits(billing_faq):
    backend = FakeBackend(answer="  Generated answer.  ")
    service = ReplyService(InMemoryDocumentStore([billing_faq]), generative_backend=backend)
    result = asyncio.run(service.generate_reply(**REFUND, customer_name="Alex"))

    assert result.source == ReplySource.GENERATIVE
    assert result.reply_text == "Generated answer."
    assert backend.prompts[0].startswith("The customer Alex has submitted a ticket")


@pytest.mark.parametrize("backend", [
    FakeBackend(error=LLMException("connection refused")),
    FakeBackend(answer=None),
    FakeBackend(answer="   "),
    FakeBackend(answer="late", delay=1.0),
])
def test_backend_failure_falls_back_to_keywords(billing_faq, backend):
    service = ReplyService(
        InMemoryDocumentStore([billing_faq]), generative_backend=backend, backend_timeout=0.05
    )
    result = asyncio.run(service.generate_reply(**REFUND))

    assert result.source == ReplySource.KEYWORD
    assert "Refunds are processed within 5 business days." in result.reply_text


def test_unreadable_knowledge_base_sends_acknowledgement():
    service = ReplyService(FailingStore())
    result = asyncio.run(service.generate_reply(**REFUND))

    assert result.source == ReplySource.NONE
    assert result.branch == "acknowledgement"
    assert '"Refund request"' in result.reply_text


def test_assembly_error_quotes_best_document(knowledge_base, monkeypatch):
    def broken(query, candidates):
        raise RuntimeError("template missing")

    monkeypatch.setattr("supportdesk.replies.application.services.assemble_reply", broken)
    service = ReplyService(InMemoryDocumentStore(knowledge_base))
    result = asyncio.run(service.generate_reply(**REFUND))

    assert result.branch == "acknowledgement"
    assert result.source == ReplySource.KEYWORD
    assert "you might find the following information helpful" in result.reply_text
    assert "Refunds are processed within 5 business days." in result.reply_text


def test_vector_index_supplies_candidates(knowledge_base, billing_faq):
    index = FakeIndex(documents=[billing_faq])
    service = ReplyService(InMemoryDocumentStore(knowledge_base), vector_index=index)
    result = asyncio.run(service.generate_reply(**REFUND))

    assert result.source == ReplySource.VECTOR
    assert result.branch == "faq"


@pytest.mark.parametrize("index", [
    FakeIndex(error=VectorStoreException("search failed")),
    FakeIndex(documents=[]),
])
def test_vector_failure_falls_back_to_keywords(knowledge_base, index):
    service = ReplyService(InMemoryDocumentStore(knowledge_base), vector_index=index)
    result = asyncio.run(service.generate_reply(**REFUND))

    assert result.source == ReplySource.KEYWORD
    assert "Refunds are processed within 5 business days." in result.reply_text


def test_reply_is_recorded_for_ticket(billing_faq):
    recorder = FakeRecorder()
    service = ReplyService(InMemoryDocumentStore([billing_faq]), recorder=recorder)

    asyncio.run(service.generate_reply(**REFUND))
    assert recorder.records == []

    result = asyncio.run(service.generate_reply(**REFUND, ticket_id="T-1"))
    assert recorder.records == [("T-1", result)]


def test_recording_failure_is_not_surfaced(billing_faq):
    recorder = FakeRecorder(error=RepositoryException("insert failed"))
    service = ReplyService(InMemoryDocumentStore([billing_faq]), recorder=recorder)
    result = asyncio.run(service.generate_reply(**REFUND, ticket_id="T-1"))

    assert result.branch == "faq"
