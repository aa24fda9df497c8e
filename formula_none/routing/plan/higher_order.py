from typing import List, Optional

from formula_none.routing.models import PlanningContext, RoutePlan, RoutePlanner


class ChainedPlanner(RoutePlanner):

    """Runs `head` to completion, including whatever it defers to, then `tail`."""

    def __init__(self, head: RoutePlanner, tail: Optional[RoutePlanner] = None):
        self.head = head
        self.tail = tail

    @staticmethod
    def chain(planners: List[RoutePlanner]) -> RoutePlanner:
        if not planners:
            raise ValueError("nothing to chain")
        result = planners[-1]
        for planner in reversed(planners[:-1]):
            result = ChainedPlanner(planner, result)
        return result

    @property
    def name(self) -> str:
        return self.head.name

    def plan(self, ctx: PlanningContext) -> RoutePlan:
        plan = self.head.plan(ctx)
        if self.tail is None:
            return plan
        if plan.next is None:
            return RoutePlan(plan.segment, self.tail)
        return RoutePlan(plan.segment, ChainedPlanner(plan.next, self.tail))
