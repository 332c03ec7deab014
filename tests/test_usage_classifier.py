"""
Tests for usage_classifier module.
"""

import pytest
from dataclasses import replace

from componentlint.analysis.models import CapabilityFlags
from componentlint.analysis.usage_classifier import (
    UsageClassifier,
    find_render_method,
    is_rewrite_eligible,
    should_be_function,
)
from componentlint.config import PreferStatelessConfig, SettingsConfig


def class_with(render_body: str, members: str = "", base: str = "React.Component") -> str:
    return (
        f"class Foo extends {base} {{\n"
        f"{members}\n"
        f"  render() {{\n"
        f"    {render_body}\n"
        f"  }}\n"
        f"}}\n"
    )


class TestCapabilityFlags:
    """Tests for flag detection on class components."""

    def test_props_only(self, component):
        """Test that reading props sets no blocking flag."""
        _, descriptor = component(class_with("return <div>{this.props.foo}</div>;"), dedent=False)
        assert descriptor.capabilities.blocking() == ()
        assert should_be_function(descriptor)

    @pytest.mark.parametrize("render_body", [
        "return <div>{this.state.foo}</div>;",
        "this.setState({}); return <div />;",
        "const { state } = this; return <div />;",
    ])
    def test_local_state(self, component, render_body):
        """Test state reads, setState and destructured state."""
        _, descriptor = component(class_with(render_body), dedent=False)
        assert descriptor.capabilities.uses_local_state

    def test_state_field(self, component):
        """Test an instance state field."""
        _, descriptor = component(class_with("return <div />;", "  state = { open: false };"), dedent=False)
        assert descriptor.capabilities.uses_local_state

    def test_refs(self, component):
        """Test this.refs and JSX ref attributes."""
        _, by_member = component(class_with("return <div>{this.refs.x}</div>;"), dedent=False)
        _, by_attribute = component(class_with('return <div ref="foo" />;'), dedent=False)
        assert by_member.capabilities.uses_refs
        assert by_attribute.capabilities.uses_refs

    def test_ref_inside_nested_function(self, component):
        """Test that a JSX ref inside a nested non-arrow callback is still a ref."""
        _, descriptor = component(class_with(
            "return <ul>{this.props.items.map(function (i) { return <li ref=\"item\">{i}</li>; })}</ul>;"
        ), dedent=False)
        assert descriptor.capabilities.uses_refs
        assert not descriptor.capabilities.uses_this_binding
        assert not should_be_function(descriptor)

    @pytest.mark.parametrize("render_body", [
        "return <div>{this.bar}</div>;",
        "return <div>{this[bar]}</div>;",
        "return <div>{this['bar']}</div>;",
        "return <Child owner={this} />;",
        "let {props:{foo}, bar} = this; return <div>{foo}</div>;",
    ])
    def test_this_binding(self, component, render_body):
        """Test other instance accesses."""
        _, descriptor = component(class_with(render_body), dedent=False)
        assert descriptor.capabilities.uses_this_binding
        assert not should_be_function(descriptor)

    def test_this_inside_nested_function_is_ignored(self, component):
        """Test that `this` in a nested non-arrow function is not the instance."""
        _, descriptor = component(
            class_with("const f = function() { return this.bar; }; return <div>{f()}</div>;"),
            dedent=False,
        )
        assert not descriptor.capabilities.uses_this_binding

    def test_this_inside_arrow_is_the_instance(self, component):
        """Test that arrow functions keep the instance binding."""
        _, descriptor = component(
            class_with("const f = () => this.bar; return <div>{f()}</div>;"), dedent=False
        )
        assert descriptor.capabilities.uses_this_binding

    def test_lifecycle_method(self, component):
        """Test that any additional method disqualifies."""
        _, descriptor = component(
            class_with("return <div />;", "  shouldComponentUpdate() { return false; }"), dedent=False
        )
        assert descriptor.capabilities.has_disallowed_lifecycle

    def test_instance_field(self, component):
        """Test an instance field other than state."""
        _, descriptor = component(class_with("return <div />;", "  handler = () => {};"), dedent=False)
        assert descriptor.capabilities.has_disallowed_lifecycle

    def test_static_block(self, component):
        """Test a static initialization block."""
        _, descriptor = component(class_with("return <div />;", "  static { init(); }"), dedent=False)
        assert descriptor.capabilities.has_disallowed_lifecycle

    @pytest.mark.parametrize("constructor", [
        "  constructor() {}",
        "  constructor() { doSpecialStuffs(); }",
        "  constructor() { foo; }",
        "  constructor(props) { super(props); this.x = 1; }",
        "  constructor(props) { super(other); }",
    ])
    def test_non_trivial_constructor(self, component, constructor):
        """Test constructors that do more than forward to super."""
        _, descriptor = component(class_with("return <div />;", constructor), dedent=False)
        assert descriptor.capabilities.has_non_trivial_constructor

    @pytest.mark.parametrize("constructor", [
        "  constructor() { super(); }",
        "  constructor(props) { super(props); }",
        "  constructor(props, context) {\n    // forward\n    super(props, context);\n  }",
        "  constructor(...args) { super(...args); }",
    ])
    def test_trivial_constructor(self, component, constructor):
        """Test constructors that only forward their parameters."""
        _, descriptor = component(class_with("return <div />;", constructor), dedent=False)
        assert not descriptor.capabilities.has_non_trivial_constructor
        assert should_be_function(descriptor)

    @pytest.mark.parametrize("source", [
        "@foo\n" + class_with("return <div />;"),
        '@foo("bar")\n' + class_with("return <div />;"),
        "@foo\n@bar()\n" + class_with("return <div />;"),
    ])
    def test_decorators(self, component, source):
        """Test class decorators."""
        _, descriptor = component(source, dedent=False)
        assert descriptor.capabilities.uses_decorators

    def test_child_context(self, component):
        """Test a childContextTypes assignment."""
        _, descriptor = component(
            class_with("return <div>{this.props.children}</div>;")
            + "Foo.childContextTypes = { color: PropTypes.string };\n",
            dedent=False,
        )
        assert descriptor.capabilities.declares_child_context

    def test_pure_base(self, component):
        """Test PureComponent detection."""
        _, descriptor = component(class_with("return <div />;", base="React.PureComponent"), dedent=False)
        assert descriptor.capabilities.extends_pure_base

    def test_returns_null(self, component):
        """Test null/false returns from render."""
        _, descriptor = component(class_with("return true ? <div /> : null;"), dedent=False)
        assert descriptor.capabilities.returns_null_or_false


class TestLegacyFactoryFlags:
    """Tests for flag detection on legacy factory components."""

    def test_render_only(self, component):
        """Test that render plus metadata options qualify."""
        _, descriptor = component("""
            var Foo = createReactClass({
              displayName: 'Foo',
              propTypes: { foo: PropTypes.string },
              render: function() {
                return <div>{this.props.foo}</div>;
              }
            });
        """)
        assert descriptor.capabilities.blocking() == ()
        assert should_be_function(descriptor)
        assert not is_rewrite_eligible(descriptor)

    def test_get_initial_state(self, component):
        """Test getInitialState."""
        _, descriptor = component("""
            var Foo = createReactClass({
              getInitialState: function() { return {}; },
              render: function() { return <div />; }
            });
        """)
        assert descriptor.capabilities.uses_local_state

    def test_other_option(self, component):
        """Test an additional method option."""
        _, descriptor = component("""
            var Foo = createReactClass({
              componentDidMount() {},
              render() { return <div />; }
            });
        """)
        assert descriptor.capabilities.has_disallowed_lifecycle

    def test_ref_inside_nested_function(self, component):
        """Test a JSX ref inside a nested callback of the render option."""
        _, descriptor = component("""
            var Foo = createReactClass({
              render: function() {
                return <ul>{this.props.items.map(function (i) { return <li ref="item">{i}</li>; })}</ul>;
              }
            });
        """)
        assert descriptor.capabilities.uses_refs
        assert not should_be_function(descriptor)



class TestEligibility:
    """Tests for should_be_function and is_rewrite_eligible."""

    def test_function_components_never_qualify(self, component):
        """Test that existing function components are not reported."""
        _, descriptor = component("const Foo = ({foo}) => <div>{foo}</div>;")
        assert not should_be_function(descriptor)

    def test_ignore_pure_components(self, component):
        """Test the ignore_pure_components option."""
        _, descriptor = component(class_with("return <div>{this.props.foo}</div>;", base="React.PureComponent"),
                                  dedent=False)
        assert should_be_function(descriptor, PreferStatelessConfig())
        assert not should_be_function(descriptor, PreferStatelessConfig(ignore_pure_components=True))

    def test_null_return_needs_version_15(self, component):
        """Test the version setting for null-returning render methods."""
        _, descriptor = component(class_with("if (!this.props.foo) { return null; } return <div />;"),
                                  dedent=False)
        assert should_be_function(descriptor, settings=SettingsConfig())
        assert not should_be_function(descriptor, settings=SettingsConfig(version="0.14.0"))

    def test_anonymous_is_not_rewritable(self, component):
        """Test that anonymous classes qualify but are never rewritten."""
        _, descriptor = component("let x = class extends Component {\n}", dedent=False)
        assert should_be_function(descriptor)
        assert not is_rewrite_eligible(descriptor)

    @pytest.mark.parametrize("flag", CapabilityFlags.BLOCKING)
    def test_each_blocking_flag_disqualifies(self, component, flag):
        """Test monotonicity: setting any blocking flag removes eligibility."""
        _, descriptor = component(class_with("return <div>{this.props.foo}</div>;"), dedent=False)
        assert is_rewrite_eligible(descriptor)
        flagged = replace(descriptor, capabilities=replace(descriptor.capabilities, **{flag: True}))
        assert not should_be_function(flagged)
        assert not is_rewrite_eligible(flagged)


class TestInstanceReferences:
    """Tests for collect_instance_references."""

    def references(self, component, render_body):
        unit, descriptor = component(class_with(render_body), dedent=False)
        render = find_render_method(unit, descriptor.body)
        return UsageClassifier(unit).collect_instance_references([render.child_by_field_name("body")])

    def test_keys_in_first_use_order(self, component):
        """Test that keys are collected once each, in order of first use."""
        refs = self.references(component, "return <div a={this.props.b}>{this.props.a}{this.props.b}</div>;")
        assert refs.props.keys == ["b", "a"]
        assert len(refs.props.key_sites) == 3
        assert not refs.props.whole

    @pytest.mark.parametrize("render_body", [
        "return <div>{this['props'].foo}</div>;",
        "return <div>{this.props['foo']}</div>;",
    ])
    def test_string_access(self, component, render_body):
        """Test bracket access with literal names."""
        refs = self.references(component, render_body)
        assert refs.props.keys == ["foo"]
        assert not refs.props.whole

    @pytest.mark.parametrize("render_body", [
        "const p = this.props; return <div>{p.foo}</div>;",
        "const { foo } = this.props; return <div>{foo}</div>;",
        "return <div>{this.props[key]}</div>;",
        "return <div>{this.props['aria-label']}</div>;",
        "return <Child {...this.props} />;",
        "return <div>{format(this.props)}</div>;",
        "this.props.foo = 1; return <div />;",
        "return <div>{this.props?.foo}</div>;",
    ])
    def test_whole_container(self, component, render_body):
        """Test every form that uses the props container as a whole."""
        refs = self.references(component, render_body)
        assert refs.props.whole
        assert refs.props.used

    def test_context_usage(self, component):
        """Test context keys."""
        refs = self.references(component, "return <div>{this.context.theme}</div>;")
        assert refs.context.keys == ["theme"]
        assert not refs.props.used

    def test_destructure_from_this(self, component):
        """Test `{props, context} = this`."""
        refs = self.references(component, "let {props:{foo}, context:{bar}} = this; return <div>{foo}</div>;")
        assert refs.props.whole and refs.context.whole
        assert [names for _, names in refs.this_destructures] == [("props", "context")]
        assert not refs.uses_this_binding
