import unittest

from rlbot.agents.base_agent import SimpleControllerState

from formula_none.behavior.behavior import (
    Behavior,
    Priority,
    Yield,
    Return,
    Abort,
    Call,
    RootCall,
    TailCall,
    should_preempt,
)
from formula_none.behavior.higher_order import Chain, Preempt, While, Yielder
from formula_none.behavior.runner import Runner, MAX_ACTIONS_PER_TICK
from formula_none.tests.helpers import car_state, make_context

IDLE_CONTROLS = SimpleControllerState()


class Scripted(Behavior):

    """Returns the actions it was given, one per call, then keeps yielding."""

    def __init__(self, name, *actions, priority=Priority.IDLE):
        self._name = name
        self.actions = list(actions)
        self.priority = priority
        self.calls = 0
        self.aborted_children = []

    @property
    def name(self):
        return self._name

    def execute(self, ctx):
        self.calls += 1
        if self.actions:
            return self.actions.pop(0)
        return Yield(SimpleControllerState(throttle=1.0))

    def on_child_abort(self, ctx, child):
        self.aborted_children.append(child.name)


class Counter(Behavior):

    """Tail calls itself `remaining` times, then yields."""

    def __init__(self, remaining):
        self.remaining = remaining

    def execute(self, ctx):
        if self.remaining == 0:
            return Yield(IDLE_CONTROLS)
        return TailCall(Counter(self.remaining - 1))


class RunnerTests(unittest.TestCase):
    def setUp(self):
        self.ctx = make_context(car_state())

    def test_empty_stack_is_idle(self):
        self.assertIsNone(Runner().execute(self.ctx))

    def test_yield(self):
        runner = Runner()
        runner.push(Scripted("root"))

        controls = runner.execute(self.ctx)

        self.assertEqual(controls.throttle, 1.0)
        self.assertEqual(runner.depth, 1)

    def test_call_runs_the_child_in_the_same_tick(self):
        child = Scripted("child")
        runner = Runner()
        runner.push(Scripted("root", Call(child)))

        runner.execute(self.ctx)

        self.assertEqual(child.calls, 1)
        self.assertEqual(runner.stack_names(), ["root", "child"])

    def test_return_resumes_the_parent(self):
        root = Scripted("root", Call(Scripted("child", Return())))
        runner = Runner()
        runner.push(root)

        runner.execute(self.ctx)

        self.assertEqual(runner.stack_names(), ["root"])
        self.assertEqual(root.calls, 2)
        self.assertEqual(root.aborted_children, [])

    def test_abort_notifies_the_parent(self):
        root = Scripted("root", Call(Scripted("child", Abort())))
        runner = Runner()
        runner.push(root)

        runner.execute(self.ctx)

        self.assertEqual(runner.stack_names(), ["root"])
        self.assertEqual(root.aborted_children, ["child"])

    def test_root_call_replaces_the_stack(self):
        runner = Runner()
        runner.push(Scripted("root"))
        runner.push(Scripted("middle"))
        runner.push(Scripted("top", RootCall(Scripted("recovery"))))

        runner.execute(self.ctx)

        self.assertEqual(runner.stack_names(), ["recovery"])

    def test_tail_call_replaces_the_top(self):
        runner = Runner()
        runner.push(Scripted("root"))
        runner.push(Scripted("top", TailCall(Scripted("next"))))

        runner.execute(self.ctx)

        self.assertEqual(runner.stack_names(), ["root", "next"])

    def test_tail_calls_do_not_grow_the_stack(self):
        runner = Runner()
        runner.push(Scripted("root"))
        runner.push(Counter(50))

        runner.execute(self.ctx)

        self.assertEqual(runner.depth, 2)

    def test_stack_empties(self):
        runner = Runner()
        runner.push(Scripted("root", Return()))

        self.assertIsNone(runner.execute(self.ctx))
        self.assertEqual(runner.depth, 0)

    def test_root_factory(self):
        runner = Runner(root_factory=lambda: Scripted("root"))

        controls = runner.execute(self.ctx)

        self.assertIsNotNone(controls)
        self.assertEqual(runner.stack_names(), ["root"])

    def test_endless_handing_over(self):
        runner = Runner()
        runner.push(Counter(10 * MAX_ACTIONS_PER_TICK))

        self.assertIsNone(runner.execute(self.ctx))
        self.assertEqual(runner.depth, 1)

    def test_not_an_action(self):
        runner = Runner()
        runner.push(Scripted("root", "oops"))

        with self.assertRaises(TypeError):
            runner.execute(self.ctx)


class ChainTests(unittest.TestCase):
    def setUp(self):
        self.ctx = make_context(car_state())

    def test_children_run_in_order(self):
        first = Scripted("first", Return())
        second = Scripted("second")
        chain = Chain(Priority.IDLE, [first, second])

        action = chain.execute(self.ctx)

        self.assertIsInstance(action, Yield)
        self.assertEqual(first.calls, 1)
        self.assertEqual(second.calls, 1)

    def test_returns_when_all_children_are_done(self):
        chain = Chain(Priority.IDLE, [Scripted("first", Return()), Scripted("second", Return())])
        self.assertIsInstance(chain.execute(self.ctx), Return)

    def test_child_abort_aborts_the_chain(self):
        second = Scripted("second")
        chain = Chain(Priority.IDLE, [Scripted("first", Abort()), second])

        self.assertIsInstance(chain.execute(self.ctx), Abort)
        self.assertEqual(second.calls, 0)

    def test_tail_call_replaces_the_child(self):
        replacement = Scripted("replacement")
        chain = Chain(Priority.IDLE, [Scripted("first", TailCall(replacement))])

        self.assertIsInstance(chain.execute(self.ctx), Yield)
        self.assertEqual(replacement.calls, 1)

    def test_call_goes_to_the_runner(self):
        child = Scripted("child")
        runner = Runner()
        runner.push(Chain(Priority.IDLE, [Scripted("first", Call(child))]))

        runner.execute(self.ctx)

        self.assertEqual(runner.depth, 2)
        self.assertEqual(child.calls, 1)


class WhileTests(unittest.TestCase):
    def test_runs_while_the_predicate_holds(self):
        child = Scripted("child")
        behavior = While(lambda ctx: ctx.time < 1.0, child)

        self.assertIsInstance(behavior.execute(make_context(car_state(), time=0.5)), Yield)
        self.assertIsInstance(behavior.execute(make_context(car_state(), time=1.5)), Return)
        self.assertEqual(child.calls, 1)


class YielderTests(unittest.TestCase):
    def test_yields_for_a_while(self):
        controls = SimpleControllerState(boost=True)
        yielder = Yielder(controls, 0.5)

        self.assertIs(yielder.execute(make_context(car_state(), time=3.0)).controls, controls)
        self.assertIsInstance(yielder.execute(make_context(car_state(), time=3.4)), Yield)
        self.assertIsInstance(yielder.execute(make_context(car_state(), time=3.5)), Return)


class PriorityTests(unittest.TestCase):
    def setUp(self):
        self.ctx = make_context(car_state())

    def test_should_preempt(self):
        idle = Scripted("idle")
        strike = Scripted("strike", priority=Priority.STRIKE)

        self.assertTrue(should_preempt(strike, idle))
        self.assertFalse(should_preempt(idle, strike))
        self.assertFalse(should_preempt(Scripted("other strike", priority=Priority.STRIKE), strike))

    def test_preempt_keeps_the_running_child_on_ties(self):
        defense = Scripted("defense", priority=Priority.DEFENSE)
        behavior = Preempt(lambda ctx: Scripted("other defense", priority=Priority.DEFENSE), defense)

        behavior.execute(self.ctx)

        self.assertIs(behavior.child, defense)
        self.assertEqual(defense.calls, 1)

    def test_preempt_switches_to_higher_priority(self):
        strike = Scripted("strike", priority=Priority.STRIKE)
        behavior = Preempt(lambda ctx: strike, Scripted("idle"))

        behavior.execute(self.ctx)
        behavior.execute(self.ctx)

        self.assertIs(behavior.child, strike)
        self.assertEqual(strike.calls, 2)
        self.assertEqual(behavior.priority, Priority.STRIKE)


if __name__ == "__main__":
    unittest.main()
