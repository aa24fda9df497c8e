from typing import Callable, List, Optional

from rlbot.agents.base_agent import SimpleControllerState

from formula_none.behavior.behavior import Behavior, Yield, Return, Abort, Call, RootCall, TailCall
from formula_none.eeg import Print

# guards against behaviors handing control back and forth forever within a tick
MAX_ACTIONS_PER_TICK = 100


class Runner:

    """The behavior stack. The top behavior is the one in control.

    Executing a tick keeps applying the actions returned by the top behavior until one of
    them yields controls. Behaviors may push children (`Call`), finish (`Return`, `Abort`),
    replace themselves (`TailCall`) or start over from a new root (`RootCall`).
    """

    def __init__(self, root_factory: Optional[Callable[[], Behavior]] = None):
        self.root_factory = root_factory
        self.stack: List[Behavior] = []

    @property
    def depth(self) -> int:
        return len(self.stack)

    def stack_names(self) -> List[str]:
        return [behavior.name for behavior in self.stack]

    def push(self, behavior: Behavior):
        self.stack.append(behavior)

    def execute(self, ctx) -> Optional[SimpleControllerState]:
        """Runs the stack for one tick. Returns None when there is nothing to do."""
        for _ in range(MAX_ACTIONS_PER_TICK):
            if not self.stack:
                if self.root_factory is None:
                    return None
                self.stack.append(self.root_factory())

            behavior = self.stack[-1]
            action = behavior.execute(ctx)

            if isinstance(action, Yield):
                ctx.eeg.draw(Print(" > ".join(self.stack_names())))
                return action.controls
            elif isinstance(action, Call):
                self.stack.append(action.behavior)
            elif isinstance(action, Return):
                self.stack.pop()
            elif isinstance(action, Abort):
                self.stack.pop()
                if self.stack:
                    self.stack[-1].on_child_abort(ctx, behavior)
            elif isinstance(action, RootCall):
                ctx.eeg.log("Runner", f"root call to {action.behavior.name}")
                self.stack = [action.behavior]
            elif isinstance(action, TailCall):
                self.stack[-1] = action.behavior
            else:
                raise TypeError(f"{behavior.name} returned {action!r}, which is not an Action")

        ctx.eeg.log("Runner", f"gave up after {MAX_ACTIONS_PER_TICK} actions in one tick")
        return None
