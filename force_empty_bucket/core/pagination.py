import logging
from typing import Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

State = TypeVar("State")

def do_until(action: Callable[[Optional[State]], Optional[State]], condition: Callable[[Optional[State]], bool],
        on_error: Callable[[Exception], None], initial_state: Optional[State] = None) -> bool:
    """
    Repeatedly runs action until condition is satisfied.

    action: receives the current continuation state and returns the next one.  The first invocation gets initial_state.
    condition: evaluated on the state returned by each successful action; the loop ends once it returns True.
    on_error: called exactly once with the exception if any action raises.  The exception goes no further.

    Actions run one at a time; the next one only starts after the previous one has returned.  There is no upper bound on
    the number of iterations, so a remote that keeps handing back a continuation keeps us looping.

    Returns True if the loop finished because the condition was met, False if it was cut short by an error.
    """
    state = initial_state
    iteration = 0

    while True:
        iteration += 1
        try:
            state = action(state)
        except Exception as ex:
            logger.debug(f"Action failed on iteration {iteration}: {type(ex).__name__}")
            on_error(ex)
            return False

        if condition(state):
            logger.debug(f"Condition met after {iteration} iteration(s)")
            return True
