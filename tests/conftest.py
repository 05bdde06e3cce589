import pytest

from supportdesk.replies.domain import Document


BILLING_FAQ = (
    "Q: How do I get a refund?\n"
    "A: Refunds are processed within 5 business days.\n\n"
    "Q: What is your pricing?\n"
    "A: Plans start at $9.99/month."
)


@pytest.fixture
def billing_faq() -> Document:
    return Document(id="1", name="Billing FAQ", content=BILLING_FAQ, type="faq")


@pytest.fixture
def knowledge_base(billing_faq) -> list:
    return [
        billing_faq,
        Document(
            id="2",
            name="Pricing Plans",
            content="Our subscription plans include Basic and Pro. "
                    "You can upgrade or downgrade your plan at any time from the dashboard.",
        ),
        Document(
            id="3",
            name="Troubleshooting Guide",
            content="If you see an error when saving, clear your browser cache and try again. "
                    "Most sync problems are fixed by signing out and back in.",
        ),
        Document(
            id="4",
            name="Password Help",
            content="Password reset: open the login page and choose Forgot Password "
                    "to receive a reset link by email.",
        ),
    ]
