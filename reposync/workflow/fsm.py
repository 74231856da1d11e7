"""Commit-and-push state machine using transitions library.

One machine is created per commit_and_push call and thrown away afterwards;
nothing is persisted. Every failure moves straight to a terminal state and
no step is retried.

Usage:
    from reposync.workflow.fsm import CommitPushFSM

    fsm = CommitPushFSM("demo")
    fsm.check_status()
    fsm.stage()
    fsm.commit()
    fsm.push()
    fsm.push_ok()
"""

import logging
from typing import Callable

from transitions import Machine

logger = logging.getLogger(__name__)


STATES = [
    "idle",
    "checking_status",
    "clean",
    "status_failed",
    "staging",
    "stage_failed",
    "committing",
    "nothing_to_commit",
    "commit_failed",
    "pushing",
    "push_failed",
    "pushed",
]

TERMINAL_STATES = {
    "clean",
    "status_failed",
    "stage_failed",
    "nothing_to_commit",
    "commit_failed",
    "push_failed",
    "pushed",
}

# Terminal states that count as success
SUCCESS_STATES = {"clean", "nothing_to_commit", "pushed"}

TRANSITIONS = [
    {"trigger": "check_status", "source": "idle", "dest": "checking_status"},

    # Status query outcome
    {"trigger": "found_clean", "source": "checking_status", "dest": "clean"},
    {"trigger": "status_error", "source": "checking_status", "dest": "status_failed"},
    {"trigger": "stage", "source": "checking_status", "dest": "staging"},

    # Staging outcome
    {"trigger": "stage_error", "source": "staging", "dest": "stage_failed"},
    {"trigger": "commit", "source": "staging", "dest": "committing"},

    # Commit outcome
    {"trigger": "nothing_staged", "source": "committing", "dest": "nothing_to_commit"},
    {"trigger": "commit_error", "source": "committing", "dest": "commit_failed"},
    {"trigger": "push", "source": "committing", "dest": "pushing"},

    # Push outcome
    {"trigger": "push_error", "source": "pushing", "dest": "push_failed"},
    {"trigger": "push_ok", "source": "pushing", "dest": "pushed"},
]


class CommitPushFSM:
    """State machine for a single commit-and-push run.

    Wraps the transitions library with:
    - a fresh "idle" start on every instance
    - a transition history for callers that report progress
    - logging of every transition
    """

    def __init__(self, repo_name: str, on_transition: Callable[[str, str, str], None] | None = None):
        """Initialize FSM for one run.

        Args:
            repo_name: Repository name, for log lines
            on_transition: Optional callback(from_state, to_state, trigger) called after transitions
        """
        self.repo_name = repo_name
        self.on_transition = on_transition
        self.history: list[tuple[str, str, str]] = []

        self.machine = Machine(
            model=self,
            states=STATES,
            transitions=TRANSITIONS,
            initial="idle",
            auto_transitions=False,  # Only explicit transitions
            send_event=True,  # Pass EventData to callbacks
            after_state_change="on_state_change",  # Callback after any transition
        )

    def on_state_change(self, event) -> None:
        """Callback after any state transition."""
        from_state = event.transition.source
        to_state = event.transition.dest
        trigger = event.event.name

        logger.info(f"[FSM] {self.repo_name}: {from_state} -> {to_state} ({trigger})")
        self.history.append((from_state, to_state, trigger))

        if self.on_transition:
            self.on_transition(from_state, to_state, trigger)

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def succeeded(self) -> bool:
        return self.state in SUCCESS_STATES
