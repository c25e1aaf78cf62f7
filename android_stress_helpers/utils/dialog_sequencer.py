# utils/dialog_sequencer.py
"""
First-run onboarding dismissal.

Which screens an app shows on first launch depends on device state (are
there accounts on the device, has the wizard been seen before), so the flow
is modelled as a small state machine fed with what is currently on screen.
``transition`` is pure; ``DialogDismissalSequencer`` does the probing and the
clicking through an ElementLocator.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from android_stress_helpers import config
from android_stress_helpers.utils.element_query import ElementQuery

logger = logging.getLogger(__name__)

MAX_SETUP_STEPS = 4


class OnboardingState(Enum):
    START = 'start'
    TERMS_SHOWN = 'terms_shown'
    ACCOUNT_CHECK = 'account_check'
    NO_ACCOUNT_PATH = 'no_account_path'
    HAS_ACCOUNT_PATH = 'has_account_path'
    DONE = 'done'


class OnboardingAction(Enum):
    NONE = 'none'
    ACCEPT_TERMS = 'accept_terms'
    DECLINE_SIGN_IN = 'decline_sign_in'
    CONTINUE = 'continue'


@dataclass(frozen=True)
class OnboardingStep:
    state: OnboardingState
    step: int = 0
    exhausted: bool = False


@dataclass(frozen=True)
class UiObservation:
    """What was visible when the state was evaluated. None means not probed."""
    terms_visible: Optional[bool] = None
    no_accounts_marker: Optional[bool] = None
    in_setup_wizard: Optional[bool] = None


def transition(current: OnboardingStep, observation: UiObservation,
               max_steps=MAX_SETUP_STEPS):
    """Returns ``(next_step, action)`` for the current step and observation."""
    state = current.state
    if state is OnboardingState.START:
        if observation.terms_visible:
            return OnboardingStep(OnboardingState.TERMS_SHOWN), OnboardingAction.ACCEPT_TERMS
        return OnboardingStep(OnboardingState.ACCOUNT_CHECK), OnboardingAction.NONE
    if state is OnboardingState.TERMS_SHOWN:
        return OnboardingStep(OnboardingState.ACCOUNT_CHECK), OnboardingAction.NONE
    if state is OnboardingState.ACCOUNT_CHECK:
        if observation.no_accounts_marker:
            return OnboardingStep(OnboardingState.NO_ACCOUNT_PATH), OnboardingAction.NONE
        return OnboardingStep(OnboardingState.HAS_ACCOUNT_PATH, 0), OnboardingAction.NONE
    if state is OnboardingState.NO_ACCOUNT_PATH:
        return OnboardingStep(OnboardingState.DONE), OnboardingAction.DECLINE_SIGN_IN
    if state is OnboardingState.HAS_ACCOUNT_PATH:
        if not observation.in_setup_wizard:
            return OnboardingStep(OnboardingState.DONE, current.step), OnboardingAction.NONE
        if current.step >= max_steps:
            return OnboardingStep(OnboardingState.DONE, current.step, exhausted=True), OnboardingAction.NONE
        return OnboardingStep(OnboardingState.HAS_ACCOUNT_PATH, current.step + 1), OnboardingAction.CONTINUE
    return current, OnboardingAction.NONE


@dataclass(frozen=True)
class OnboardingQueries:
    """The elements an app's first-run flow is recognised by."""
    terms_accept: ElementQuery
    no_accounts_marker: ElementQuery
    negative_button: ElementQuery
    positive_button: ElementQuery
    setup_wizard: ElementQuery


@dataclass
class SequenceResult:
    final: OnboardingStep
    path: List[OnboardingState] = field(default_factory=list)
    clicks: List[OnboardingAction] = field(default_factory=list)

    @property
    def exhausted(self):
        return self.final.exhausted


class DialogDismissalSequencer:
    """Drives ``transition`` against the live screen. Never fails the caller."""

    def __init__(self, locator, queries: OnboardingQueries, init_wait=None,
                 transition_wait=None, max_steps=MAX_SETUP_STEPS):
        self.locator = locator
        self.queries = queries
        self.init_wait = config.APP_INIT_WAIT if init_wait is None else init_wait
        self.transition_wait = config.MAX_DIALOG_TRANSITION if transition_wait is None else transition_wait
        self.max_steps = max_steps

    def run(self) -> SequenceResult:
        current = OnboardingStep(OnboardingState.START)
        result = SequenceResult(final=current, path=[current.state])
        terms = None
        while current.state is not OnboardingState.DONE:
            observation = UiObservation()
            if current.state is OnboardingState.START:
                terms = self.locator.wait_for(self.queries.terms_accept, self.init_wait)
                observation = UiObservation(terms_visible=terms is not None)
            elif current.state is OnboardingState.ACCOUNT_CHECK:
                marker = self.locator.wait_for(self.queries.no_accounts_marker, self.transition_wait)
                observation = UiObservation(no_accounts_marker=marker is not None)
            elif current.state is OnboardingState.HAS_ACCOUNT_PATH:
                observation = UiObservation(in_setup_wizard=self.locator.has(self.queries.setup_wizard))

            current, action = transition(current, observation, self.max_steps)
            result.path.append(current.state)
            if self._perform(action, terms):
                result.clicks.append(action)

        result.final = current
        if current.exhausted:
            logger.info("Setup wizard still showing after %d steps, leaving it", current.step)
        else:
            logger.info("Initial dialogs dismissed via %s", " -> ".join(s.value for s in result.path))
        return result

    def _perform(self, action, terms):
        """Clicks for the action; returns True if something was clicked."""
        if action is OnboardingAction.ACCEPT_TERMS:
            target = terms
        elif action is OnboardingAction.DECLINE_SIGN_IN:
            target = self.locator.wait_for(self.queries.negative_button, self.transition_wait)
        elif action is OnboardingAction.CONTINUE:
            target = self.locator.wait_for(self.queries.positive_button, self.transition_wait)
        else:
            return False
        if target is None:
            logger.debug("No control found for %s", action.value)
            return False
        target.click()
        return True
