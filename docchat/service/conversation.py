"""Question/answer loop that fills placeholders one at a time."""

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from loguru import logger

from docchat.data.models import Placeholder, Session


def _has(*words: str) -> Callable[[str], bool]:
    return lambda name: any(word in name for word in words)


def _has_all(*words: str) -> Callable[[str], bool]:
    return lambda name: all(word in name for word in words)


# (predicate over the lowercased placeholder name, question), first match wins
QUESTION_TABLE: List[Tuple[Callable[[str], bool], str]] = [
    (_has_all("company", "name"),
     "What is the name of your company? Please provide the full legal company name "
     "as it appears in your incorporation documents."),
    (_has_all("company", "address"),
     "What is your company's registered business address? Include street address, "
     "city, state, and zip code."),
    (_has("investor"),
     "What is the name of the investor? Please provide the full legal name of the "
     "individual or entity making the investment."),
    (_has("date"),
     "What is the date for this document? Please provide the date in MM/DD/YYYY "
     "format (e.g., 01/15/2024)."),
    (_has("state", "jurisdiction"),
     "What state or jurisdiction governs this agreement? Please provide the full "
     "state name (e.g., Delaware, California)."),
    (_has("incorporation"),
     "In which state is your company incorporated? Please provide the full state "
     "name where your company was legally incorporated."),
    (_has("title", "position"),
     "What is the title or position of the person signing this document? "
     "(e.g., CEO, President, Managing Director)"),
    (lambda name: "name" in name and "company" not in name,
     "What is the full name of the person? Please provide first name, middle name "
     "(if applicable), and last name."),
    (_has("amount", "value", "price"),
     "What is the monetary amount or value? Please provide the amount in numbers "
     "(e.g., 100000 for $100,000)."),
]

DEFAULT_QUESTION = 'Please provide the value for "{name}". What information should be filled in for this field?'

CONFIRMATION_PHRASES = ("yes", "generate", "generate document")

COMPLETION_MESSAGE = (
    "Perfect! All placeholders have been filled. Reply \"yes\" or \"generate\" "
    "to create your document."
)
REMINDER_MESSAGE = "All placeholders have been filled! Would you like me to generate the final document?"
CONFIRMED_MESSAGE = (
    "Perfect! I'll generate your document now. Click the 'Generate Document' "
    "button below to download it."
)


@dataclass
class ChatReply:
    """What the assistant says after a turn."""

    message: str
    kind: str  # question, completion, confirmed
    placeholder: Optional[str] = None
    suggestions: List[str] = field(default_factory=list)
    all_filled: bool = False
    ready_to_generate: bool = False


def contextual_question(placeholder_name: str) -> str:
    """Pick the question to ask for a placeholder."""
    lower_name = placeholder_name.lower()
    for predicate, question in QUESTION_TABLE:
        if predicate(lower_name):
            return question
    return DEFAULT_QUESTION.format(name=placeholder_name)


def is_confirmation(message: str) -> bool:
    """Whether a message asks to generate the document."""
    lower_message = message.lower().strip()
    return lower_message in CONFIRMATION_PHRASES or "generate" in lower_message


def next_question(placeholders: List[Placeholder]) -> ChatReply:
    """Prompt for the first unfilled placeholder, or announce completion."""
    current = next((p for p in placeholders if not p.filled), None)
    if current is None:
        return ChatReply(
            message=COMPLETION_MESSAGE,
            kind="completion",
            suggestions=["Yes", "Generate document"],
            all_filled=True,
        )
    return ChatReply(
        message=contextual_question(current.name),
        kind="question",
        placeholder=current.name,
    )


def apply_answer(placeholders: List[Placeholder], answer: str) -> Placeholder:
    """Store ``answer`` verbatim in the first unfilled placeholder.

    No validation is done, whatever the user typed becomes the value.

    Returns:
        the placeholder that was filled

    Raises:
        ValueError: every placeholder is already filled
    """
    current = next((p for p in placeholders if not p.filled), None)
    if current is None:
        raise ValueError("All placeholders are already filled")
    current.fill(answer)
    return current


class ConversationService:
    """Drives a session through the fill loop."""

    def start(self, session: Session) -> ChatReply:
        return next_question(session.placeholders)

    def handle_message(self, session: Session, message: str) -> ChatReply:
        """Process one chat turn.

        While placeholders remain, the message answers the open one. Once all
        are filled, only a confirmation unlocks generation.

        Args:
            session: session to update in place
            message: user text

        Returns:
            the reply for the client
        """
        if session.all_filled:
            if is_confirmation(message):
                session.confirmed = True
                logger.info(f"Session {session.session_id} confirmed generation")
                return ChatReply(
                    message=CONFIRMED_MESSAGE,
                    kind="confirmed",
                    suggestions=["Generate document"],
                    all_filled=True,
                    ready_to_generate=True,
                )
            return ChatReply(
                message=REMINDER_MESSAGE,
                kind="completion",
                suggestions=["Yes", "Generate document"],
                all_filled=True,
            )

        filled = apply_answer(session.placeholders, message)
        session.filled_count += 1
        logger.info(
            f"Session {session.session_id} filled '{filled.name}' "
            f"({session.filled_count}/{len(session.placeholders)})"
        )
        return next_question(session.placeholders)
