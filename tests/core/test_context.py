"""Tests for declaration contexts, enhancers and the context stack."""
import pytest

from picodsl import (
    ContextStack,
    Enhancer,
    EnhancerKind,
    ParallelContext,
    PipelineConfig,
    PipelineNode,
    PreconditionError,
    SequenceContext,
)


class TestEnhancer:
    def test_set_group_if_unset(self):
        node = PipelineNode("x")
        Enhancer.set_group_if_unset("team-a").apply(node)
        Enhancer.set_group_if_unset("team-b").apply(node)
        assert node.group == "team-a"

    def test_generic(self):
        node = PipelineNode("x")
        enhancer = Enhancer.generic(lambda p: p.tag("k", "v"))
        assert enhancer.kind is EnhancerKind.GENERIC
        enhancer.apply(node)
        assert node.tags == {"k": "v"}

    def test_descriptor_is_inspectable(self):
        enhancer = Enhancer.set_group_if_unset("team-a")
        assert enhancer.kind is EnhancerKind.SET_GROUP_IF_UNSET
        assert enhancer.group == "team-a"
        assert enhancer.action is None


class TestContextScopes:
    def test_sequence_context_type(self, config):
        ctx = config.sequence().context()
        assert isinstance(ctx, SequenceContext)
        assert hasattr(ctx, "parallel") and not hasattr(ctx, "sequence")

    def test_parallel_context_type(self, config):
        ctx = config.parallel().context()
        assert isinstance(ctx, ParallelContext)
        assert hasattr(ctx, "sequence") and not hasattr(ctx, "parallel")

    def test_context_declares_on_owner(self, config, staged):
        seq = config.sequence()
        with seq.context() as ctx:
            node = ctx.pipeline("x", staged)
            par = ctx.parallel()
        assert seq.children == [node, par]

    def test_init_runs_before_body(self, config):
        order = []
        config.sequence().context(
            lambda ctx: order.append(("body", dict(ctx.data))),
            init=lambda ctx: (order.append(("init", None)), ctx.data.update(env="prod")),
        )
        assert order == [("init", None), ("body", {"env": "prod"})]


class TestEnhancerApplication:
    def test_for_all_applies_on_close(self, config, staged):
        seq = config.sequence()

        def body(ctx):
            ctx.for_all(lambda p: p.tag("owner", "ci"))
            node = ctx.pipeline("x", staged)
            assert node.tags == {}

        seq.context(body)
        assert seq.children[0].tags == {"owner": "ci"}

    def test_applies_to_pipelines_declared_before_context(self, config, staged):
        seq = config.sequence()
        before = seq.pipeline("before", staged)
        seq.context(lambda ctx: ctx.for_all(lambda p: p.tag("scoped", "yes")))
        assert before.tags == {"scoped": "yes"}

    def test_pipelines_declared_after_close_are_untouched(self, config, staged):
        seq = config.sequence()
        seq.context(lambda ctx: ctx.for_all(lambda p: p.tag("scoped", "yes")))
        after = seq.pipeline("after", staged)
        assert after.tags == {}

    def test_enhancers_in_registration_order(self, config, staged):
        seq = config.sequence()

        def body(ctx):
            ctx.for_all(lambda p: p.parameter("v", "first"))
            ctx.for_all(lambda p: p.parameter("v", "second"))
            ctx.pipeline("x", staged)

        seq.context(body)
        assert seq.children[0].parameters == {"v": "second"}

    def test_reaches_nested_groups(self, config, staged):
        seq = config.sequence()

        def body(ctx):
            ctx.for_all(lambda p: p.tag("deep", "1"))
            par = ctx.parallel()
            par.sequence().pipeline("nested", staged)

        seq.context(body)
        assert seq.all_pipelines()[0].tags == {"deep": "1"}


class TestGroupAssignment:
    def test_group_assigns_label(self, config, staged):
        seq = config.sequence()
        seq.group("team-a", lambda g: g.pipeline("x", staged))
        assert seq.children[0].group == "team-a"

    def test_inner_group_wins(self, config, staged):
        seq = config.sequence()

        def outer(g):
            def branches(par):
                par.group("team-a", lambda inner: inner.pipeline("x", staged))
                par.pipeline("y", staged)
            g.parallel(branches)

        seq.group("team-b", outer)
        x, y = seq.all_pipelines()
        assert x.group == "team-a"
        assert y.group == "team-b"

    def test_explicit_group_is_kept(self, config):
        seq = config.sequence()

        def body(g):
            def declare(p):
                p.stage("s")
                p.group = "manual"
            g.pipeline("x", declare)

        seq.group("team", body)
        assert seq.children[0].group == "manual"

    def test_with_statement_form(self, config, staged):
        par = config.parallel()
        with par.group("team-a") as g:
            g.pipeline("x", staged)
            with g.sequence() as inner:
                inner.pipeline("y", staged)
        assert [p.group for p in par.all_pipelines()] == ["team-a", "team-a"]


class TestContextStack:
    def test_push_and_pop(self, config):
        seq = config.sequence()
        stack = config.context_stack
        assert stack.current is None
        with seq.context() as outer:
            assert stack.current is outer
            with seq.context() as inner:
                assert stack.current is inner
                assert list(stack) == [outer, inner]
            assert stack.current is outer
        assert len(stack) == 0

    def test_out_of_order_close_raises(self, config):
        seq = config.sequence()
        outer = seq.context()
        inner = seq.context()
        outer.open()
        inner.open()
        with pytest.raises(PreconditionError, match="reverse order"):
            outer.close()

    def test_context_cannot_reopen(self, config):
        ctx = config.sequence().context(lambda c: None)
        with pytest.raises(PreconditionError):
            ctx.open()

    def test_failed_body_unwinds_without_applying(self, config, staged):
        seq = config.sequence()
        seq.pipeline("x", staged)

        def body(ctx):
            ctx.for_all(lambda p: p.tag("applied", "yes"))
            raise RuntimeError("declaration failed")

        with pytest.raises(RuntimeError):
            seq.context(body)
        assert len(config.context_stack) == 0
        assert seq.children[0].tags == {}

    def test_each_configuration_has_its_own_stack(self):
        first = PipelineConfig()
        second = PipelineConfig()
        assert first.context_stack is not second.context_stack
        with first.sequence().context():
            assert len(first.context_stack) == 1
            assert len(second.context_stack) == 0

    def test_standalone_stack(self):
        stack = ContextStack()
        assert stack.current is None
        assert len(stack) == 0
