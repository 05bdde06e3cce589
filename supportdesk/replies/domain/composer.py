"""
Reply Composer
==============

Pure string assembly of support replies from a fixed skeleton:

    Dear {name},

    {opening}

    [{lead_in}

    ]{primary content}[

    {supplement heading}

    {supplement}]

    {closing}

    Best regards,
    Support Team

Each branch has its own wording, kept in ``REPLY_TEMPLATES``.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from supportdesk.replies.domain.entities import ReplyBranch

SIGNATURE = "Best regards,\nSupport Team"
PARAGRAPH_BREAK = "\n\n"
DEFAULT_SUPPLEMENT_HEADING = "Additionally, you might find this information helpful:"


@dataclass(frozen=True)
class ReplyTemplate:
    """
    Literal wording of one branch. ``{title}`` is substituted in openings.

    The ``canned_*`` fields describe the reply used when no document fits
    the branch. A canned closing of None means the body already ends the reply.
    """
    opening: str
    closing: str
    lead_in: Optional[str] = None
    supplement_heading: str = DEFAULT_SUPPLEMENT_HEADING
    canned_body: str = ""
    canned_opening: Optional[str] = None
    canned_closing: Optional[str] = ""

    def render_canned_closing(self) -> Optional[str]:
        if self.canned_closing == "":
            return self.closing
        return self.canned_closing


REPLY_TEMPLATES: Dict[ReplyBranch, ReplyTemplate] = {
    ReplyBranch.FAQ: ReplyTemplate(
        opening='Thank you for contacting our support team regarding "{title}". '
                "I'm happy to help with your question.",
        closing="If you need any further clarification or have additional questions, "
                "please don't hesitate to ask.",
    ),
    ReplyBranch.SUBSCRIPTION: ReplyTemplate(
        opening="Thank you for your inquiry about our subscription options. "
                "I'd be happy to help you with that.",
        closing="If you have any specific questions about our plans or need assistance with "
                "your subscription, please let me know and I'll be glad to provide more "
                "detailed guidance.",
        canned_body="We offer several different subscription tiers to meet different needs. "
                    "You can manage your subscription through your account dashboard in the "
                    '"Subscription" section.',
    ),
    ReplyBranch.TECHNICAL: ReplyTemplate(
        opening="I'm sorry to hear you're experiencing technical difficulties with "
                '"{title}". Let me help you resolve this issue.',
        lead_in="Based on our documentation:",
        supplement_heading="Additionally, you might find these troubleshooting steps helpful:",
        closing="If these steps don't resolve your issue, please provide more specific details "
                "about the problem you're encountering, including any error messages you're "
                "seeing, and I'll be happy to assist you further.",
        canned_body="To better assist you, could you please provide the following information:\n\n"
                    "1. What specific error messages are you seeing?\n"
                    "2. What steps have you already tried?\n"
                    "3. What browser/device are you using?",
        canned_closing="With this information, I'll be able to provide you with more targeted "
                       "troubleshooting steps.",
    ),
    ReplyBranch.ACCOUNT: ReplyTemplate(
        opening="Thank you for reaching out about your account. I'm here to help.",
        lead_in="Regarding your account inquiry:",
        closing="If you have any other questions about your account, please don't hesitate to ask.",
        canned_body="If you're having trouble accessing your account, here are some steps you can take:\n\n"
                    '1. Try resetting your password using the "Forgot Password" link on the login page\n'
                    "2. Ensure you're using the correct email address associated with your account\n"
                    "3. Check if your account has been verified (you should have received a "
                    "verification email)",
        canned_closing="If you continue to experience issues, please provide more details about the "
                       "specific problem you're encountering, and I'll be happy to assist you further.",
    ),
    ReplyBranch.PASSWORD_RESET: ReplyTemplate(
        opening="Thank you for reaching out about resetting your password. I'm happy to help.",
        closing="If you have any issues with the password reset process, please let me know and "
                "I'll be glad to assist further.",
        canned_body="To reset your password, please follow these steps:\n\n"
                    "1. Go to the login page on our website\n"
                    '2. Click on the "Forgot Password" link below the login form\n'
                    "3. Enter the email address associated with your account\n"
                    "4. Check your email for a password reset link\n"
                    "5. Click the link and follow the instructions to create a new password",
        canned_closing="If you don't receive the password reset email within a few minutes, please "
                       "check your spam or junk folder. If you still don't see it, please let me know "
                       "and I'll help you troubleshoot further.",
    ),
    ReplyBranch.REFUND: ReplyTemplate(
        opening='Thank you for contacting us regarding a refund for "{title}". '
                "I understand how important this matter is to you.",
        lead_in="Regarding our refund policy:",
        closing="If you need further assistance with processing your refund or have any other "
                "questions, please don't hesitate to let me know. I'm here to help.",
        canned_body="To process your refund request, I'll need some additional information:\n\n"
                    "1. The date of your purchase\n"
                    "2. The order or transaction number (if available)\n"
                    "3. The reason for the refund request",
        canned_closing="Once I have this information, I'll be able to assist you further with your "
                       "refund request according to our company's refund policy.",
    ),
    ReplyBranch.FEATURE: ReplyTemplate(
        opening='Thank you for your inquiry about our features related to "{title}". '
                "I'm happy to provide you with information about this functionality.",
        closing="If you have any questions about how to use this feature or need further "
                "assistance, please don't hesitate to ask.",
        canned_opening='Thank you for your inquiry about features related to "{title}". '
                       "I'd be happy to provide you with more information.",
        canned_body="To better assist you with your specific feature request, could you please "
                    "provide more details about what you're trying to accomplish? This will help me "
                    "provide you with the most relevant information about our functionality.",
        canned_closing=None,
    ),
    ReplyBranch.GENERAL: ReplyTemplate(
        opening='Thank you for contacting our support team regarding "{title}". '
                "I appreciate you reaching out to us.",
        lead_in="Based on the information you've provided, I believe the following may help "
                "address your inquiry:",
        closing="If you have any further questions or need additional assistance, please don't "
                "hesitate to let me know. I'm here to help.",
        canned_body="I've reviewed your inquiry and would like to help you resolve this matter. "
                    "To better assist you, could you please provide some additional details about "
                    "your specific situation? This will help me provide you with the most accurate "
                    "and helpful information.",
    ),
    ReplyBranch.ACKNOWLEDGEMENT: ReplyTemplate(
        opening='Thank you for contacting our support team regarding "{title}". We have received '
                "your request and are working on addressing your concerns.",
        lead_in="While we prepare a more detailed response, you might find the following "
                "information helpful:",
        closing="Our team will review the details you've provided and get back to you with a more "
                "specific response shortly. In the meantime, please let us know if you have any "
                "additional information that might help us resolve your issue more efficiently.",
    ),
}


def _salutation(customer_name: str) -> str:
    return f"Dear {customer_name},"


def compose_reply(
    branch: ReplyBranch,
    customer_name: str,
    title: str,
    primary_content: str,
    supplement: str = ""
) -> str:
    """Assemble a reply around document-derived primary content."""
    template = REPLY_TEMPLATES[branch]
    parts: List[str] = [_salutation(customer_name), template.opening.format(title=title)]
    if template.lead_in:
        parts.append(template.lead_in)
    parts.append(primary_content)
    if supplement:
        parts.append(template.supplement_heading)
        parts.append(supplement)
    parts.append(template.closing)
    parts.append(SIGNATURE)
    return PARAGRAPH_BREAK.join(parts)


def compose_canned_reply(branch: ReplyBranch, customer_name: str, title: str) -> str:
    """Assemble a branch's static reply, used when no document fits."""
    template = REPLY_TEMPLATES[branch]
    opening = template.canned_opening or template.opening
    parts: List[str] = [_salutation(customer_name), opening.format(title=title)]
    if template.canned_body:
        parts.append(template.canned_body)
    closing = template.render_canned_closing()
    if closing:
        parts.append(closing)
    parts.append(SIGNATURE)
    return PARAGRAPH_BREAK.join(parts)
