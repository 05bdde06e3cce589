"""
Reply Domain Entities
=====================

Domain entities for the reply-relevance engine.

Contains pure Python business objects describing company knowledge,
inbound queries, and the replies assembled from them.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from supportdesk.core import InvalidQueryException
from supportdesk.replies.domain.text import keyword_stream


DEFAULT_CUSTOMER_NAME = "Customer"
DEFAULT_TITLE = "your inquiry"


class DocumentType(str, Enum):
    """Informational tag on company knowledge; never gates scoring."""
    FAQ = "faq"
    DOCUMENTATION = "documentation"
    POLICY = "policy"


class IntentCategory(str, Enum):
    """Coarse support topic of a query."""
    SUBSCRIPTION = "subscription"
    TECHNICAL = "technical"
    ACCOUNT = "account"
    REFUND = "refund"
    FEATURE = "feature"
    NONE = "none"


class ReplyBranch(str, Enum):
    """Pipeline branch that produced the primary content of a reply."""
    FAQ = "faq"
    SUBSCRIPTION = "subscription"
    TECHNICAL = "technical"
    ACCOUNT = "account"
    PASSWORD_RESET = "password_reset"
    REFUND = "refund"
    FEATURE = "feature"
    GENERAL = "general"
    ACKNOWLEDGEMENT = "acknowledgement"


@dataclass(frozen=True)
class Document:
    """
    A unit of company knowledge (FAQ, documentation, policy).

    Owned by the knowledge-base collaborator; read-only here.
    """
    id: str
    name: str
    content: str
    description: Optional[str] = None
    type: str = DocumentType.DOCUMENTATION.value


@dataclass(frozen=True)
class ScoredDocument:
    """A document paired with its relevance score for one query."""
    document: Document
    score: float


@dataclass(frozen=True)
class FAQPair:
    """A question/answer pair extracted from FAQ-structured content."""
    question: str
    answer: str
    score: float = 0.0
    source: Optional[str] = None

    def __post_init__(self):
        if not self.question.strip() or not self.answer.strip():
            raise ValueError("FAQ pairs need a non-empty question and answer")

    def as_excerpt(self) -> str:
        """Question and answer as a standalone block of reply text."""
        return f"{self.question}\n\n{self.answer}"


@dataclass
class Query:
    """
    Inbound reply request.

    Status and priority are advisory only and never used in scoring.
    """
    title: str
    description: str
    customer_name: str = DEFAULT_CUSTOMER_NAME
    ticket_id: Optional[str] = None
    ticket_status: str = "Open"
    ticket_priority: str = "Medium"

    def __post_init__(self):
        self.title = (self.title or "").strip()
        self.description = (self.description or "").strip()
        if not self.title and not self.description:
            raise InvalidQueryException()
        self.customer_name = (self.customer_name or "").strip() or DEFAULT_CUSTOMER_NAME

    @property
    def search_text(self) -> str:
        return f"{self.title} {self.description}"

    @property
    def text_lower(self) -> str:
        return self.search_text.lower()

    @property
    def keywords(self) -> List[str]:
        """Filtered keyword stream; repeats are kept and weigh in scoring."""
        return keyword_stream(self.search_text)

    @property
    def display_title(self) -> str:
        """Title as quoted back to the customer."""
        return self.title or DEFAULT_TITLE


@dataclass
class Reply:
    """
    Result of reply assembly.

    Storage of replies belongs to the recorder collaborator.
    """
    text: str
    branch: ReplyBranch
    primary_content: str = ""
    supplement: str = ""
    intent: IntentCategory = IntentCategory.NONE
    faq_score: float = 0.0
    faq_threshold: float = 0.0
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def has_supplement(self) -> bool:
        return bool(self.supplement)


class ReplyPromptBuilder:
    """
    Builds prompts for the generative backend.

    All prompt wording lives here.
    """

    PROMPT_TEMPLATE = (
        "The customer {customer_name} has submitted a ticket with the following details:\n\n"
        "Title: {title}\n\n"
        "Description: {description}\n\n"
        "Please provide a helpful and concise response to address their issue."
    )

    @classmethod
    def build_prompt(cls, query: Query) -> str:
        """Build the user prompt for a ticket."""
        return cls.PROMPT_TEMPLATE.format(
            customer_name=query.customer_name,
            title=query.display_title,
            description=query.description,
        )

    @classmethod
    def build_messages(cls, prompt: str) -> List[dict]:
        """Wrap a prompt as chat messages."""
        return [{"role": "user", "content": prompt}]
