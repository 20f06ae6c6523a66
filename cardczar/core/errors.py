"""Error Hierarchy — typed, categorized exceptions for all game failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces REST envelope; to_sse_event() produces SSE envelope
    - A raised domain error means the GameState was NOT modified (retry is safe)

Design Decisions:
    - Single hierarchy with CardCzarError base: FastAPI global handler catches all
    - Categories mirror the rule kinds: phase, role, validation, exhaustion, terminal
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    PHASE_VIOLATION = "phase_violation"
    ROLE_VIOLATION = "role_violation"
    VALIDATION = "validation"
    RESOURCE_EXHAUSTION = "resource_exhaustion"
    ALREADY_TERMINAL = "already_terminal"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    CONFLICT = "conflict"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    game_state_id: str | None = None
    player_index: int | None = None
    round_number: int | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class CardCzarError(Exception):
    """Base exception for all game errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "game_state_id": self.context.game_state_id,
                    "player_index": self.context.player_index,
                    "round_number": self.context.round_number,
                },
            }
        }

    def to_sse_event(self) -> dict:
        """Convert to SSE error event."""
        return {
            "type": "error",
            "data": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "severity": self.severity.value,
                "recoverable": self.severity in (
                    ErrorSeverity.INFO, ErrorSeverity.WARNING, ErrorSeverity.ERROR,
                ),
            },
        }


# ─── Phase / Terminal ───────────────────────────────────────────

class PhaseViolationError(CardCzarError):
    """Operation is not valid in the current phase."""
    def __init__(
        self, operation: str, phase: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Cannot {operation} during phase '{phase}'",
            "PHASE_VIOLATION", ErrorCategory.PHASE_VIOLATION,
            ErrorSeverity.ERROR, context, 409,
        )
        self.operation = operation
        self.phase = phase


class AlreadyFinishedError(CardCzarError):
    """Mutation attempted after the game reached FINISHED."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "The game has already finished",
            "ALREADY_FINISHED", ErrorCategory.ALREADY_TERMINAL,
            ErrorSeverity.WARNING, context, 409,
        )


# ─── Role ───────────────────────────────────────────────────────

class JudgeCannotSubmitError(CardCzarError):
    """The current judge tried to play white cards."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "The judge cannot play white cards",
            "JUDGE_CANNOT_SUBMIT", ErrorCategory.ROLE_VIOLATION,
            ErrorSeverity.ERROR, context, 403,
        )


class NotJudgeError(CardCzarError):
    """A non-judge tried to choose the winner."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Only the current judge can choose the winner",
            "NOT_JUDGE", ErrorCategory.ROLE_VIOLATION,
            ErrorSeverity.ERROR, context, 403,
        )


class ActionForbiddenError(CardCzarError):
    """Caller is not allowed to perform this action on the game."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "ACTION_FORBIDDEN", ErrorCategory.ROLE_VIOLATION,
            ErrorSeverity.ERROR, context, 403,
        )


# ─── Validation ─────────────────────────────────────────────────

class InvalidGameOptionsError(CardCzarError):
    """Start options out of range (players, hand size, round cap, decks)."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_GAME_OPTIONS", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class InvalidPlayerError(CardCzarError):
    """Player index or user id does not belong to this game."""
    def __init__(self, player: object, context: ErrorContext | None = None):
        super().__init__(
            f"Player '{player}' is not part of this game",
            "INVALID_PLAYER", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.player = player


class AlreadySubmittedError(CardCzarError):
    """Player already committed cards for the active prompt."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Cards were already played for this prompt",
            "ALREADY_SUBMITTED", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class InvalidSubmissionCountError(CardCzarError):
    """Number of submitted cards differs from the prompt's blanks."""
    def __init__(self, expected: int, got: int, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid amount of white cards to play, expected {expected} but got {got}",
            "INVALID_SUBMISSION_COUNT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.expected = expected
        self.got = got


class InvalidCardIndexError(CardCzarError):
    """Card index out of range or repeated."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_CARD_INDEX", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class PopulationTooSmallError(CardCzarError):
    """Asked for more distinct indexes than the population holds."""
    def __init__(self, wanted: int, population: int, context: ErrorContext | None = None):
        super().__init__(
            f"Cannot pick {wanted} distinct indexes from {population}",
            "POPULATION_TOO_SMALL", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class SubmissionsIncompleteError(CardCzarError):
    """choose_winner called before every non-judge has played."""
    def __init__(self, pending: int, context: ErrorContext | None = None):
        super().__init__(
            f"Not all players have played their cards ({pending} pending)",
            "SUBMISSIONS_INCOMPLETE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.pending = pending


class InvalidWinnerError(CardCzarError):
    """Chosen winner is unknown or is the judge."""
    def __init__(self, winner_id: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid winner id '{winner_id}'",
            "INVALID_WINNER", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.winner_id = winner_id


class InvalidCardError(CardCzarError):
    """Card definition rejected by the catalog."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_CARD", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


# ─── Resource Exhaustion ────────────────────────────────────────

class EmptyDeckError(CardCzarError):
    """A draw was required but the deck is empty."""
    def __init__(self, deck: str = "deck", context: ErrorContext | None = None):
        super().__init__(
            f"Zero cards left in {deck}",
            "EMPTY_DECK", ErrorCategory.RESOURCE_EXHAUSTION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.deck = deck


class EmptyBlackDeckError(EmptyDeckError):
    """No black card left to put in play."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__("black deck", context)
        self.code = "EMPTY_BLACK_DECK"


class InsufficientCardsError(CardCzarError):
    """Decks cannot satisfy every hand plus one prompt card."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INSUFFICIENT_CARDS", ErrorCategory.RESOURCE_EXHAUSTION,
            ErrorSeverity.ERROR, context, 400,
        )


# ─── Not found / Infrastructure ─────────────────────────────────

class ResourceNotFoundError(CardCzarError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class DatabaseError(CardCzarError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class ConcurrencyError(CardCzarError):
    """Concurrent modification detected (stale version on write)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONCURRENCY_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
