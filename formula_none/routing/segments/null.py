from formula_none.routing.models import AgentState, SegmentPlan, SegmentRunner, SegmentRunAction


class NullSegment(SegmentPlan):

    """A segment that takes no time and goes nowhere. Useful when there is nothing to do."""

    def __init__(self, start: AgentState):
        self._start = start

    def start(self) -> AgentState:
        return self._start

    def end(self) -> AgentState:
        return self._start

    def duration(self) -> float:
        return 0.0

    def run(self) -> SegmentRunner:
        return NullSegmentRunner()


class NullSegmentRunner(SegmentRunner):
    def execute(self, ctx):
        return SegmentRunAction.SUCCESS
