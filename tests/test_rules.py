import pytest

from orlint.errors import RuleError
from orlint.parser import Element, OrbitFile, PropDef, ScriptNode, StateVar, Text, parse_orbit_file
from orlint.rules.component import ComponentNamingRule, PropTypeRule, PublicFunctionRule, StateVariableRule
from orlint.rules.renderer import RendererCompatibilityRule
from orlint.rules.template import NonEmptyTemplateRule
from orlint.severity import Severity

GPU_COMPONENT = """
<template>
  <div class="scene">
    <shader src="glow.wgsl"></shader>
  </div>
</template>
"""


def tree_with(template=None, **script):
    return OrbitFile(template=template or Element("div", children=(Text("x"),)), script=ScriptNode(**script))


def test_non_empty_template_flags_childless_root():
    tree = tree_with(template=Element("div", line=3, column=5))

    issues = NonEmptyTemplateRule().check(tree, "Empty.orbit")

    assert len(issues) == 1
    assert issues[0].rule == "non-empty-template"
    assert issues[0].severity is Severity.WARNING
    assert (issues[0].file, issues[0].line, issues[0].column) == ("Empty.orbit", 3, 5)


def test_non_empty_template_accepts_text_only_template():
    assert NonEmptyTemplateRule().check(tree_with(template=Text("hello")), "Text.orbit") == []


def test_public_function_requires_a_method():
    rule = PublicFunctionRule()

    issues = rule.check(tree_with(), "NoMethods.orbit")

    assert [(i.rule, i.severity) for i in issues] == [("public-function", Severity.INFO)]
    assert rule.check(tree_with(methods=("open",)), "Open.orbit") == []


@pytest.mark.parametrize("name, expected", [("Button", 0), ("badComponent", 1), ("my-widget", 1), ("", 0)])
def test_component_naming_default_pattern(name, expected):
    issues = ComponentNamingRule().check(tree_with(component_name=name), "C.orbit")

    assert len(issues) == expected
    if issues:
        assert issues[0].severity is Severity.WARNING
        assert f"'{name}'" in issues[0].message


def test_component_naming_custom_pattern():
    rule = ComponentNamingRule(r"^orb[A-Z]\w*$")

    assert rule.check(tree_with(component_name="orbButton"), "C.orbit") == []
    assert len(rule.check(tree_with(component_name="Button"), "C.orbit")) == 1


def test_prop_type_required_reports_each_untyped_prop():
    props = (PropDef("label", ""), PropDef("size", "u32"), PropDef("color", "", required=False, line=9, column=2))

    issues = PropTypeRule().check(tree_with(props=props), "Props.orbit")

    assert [i.message for i in issues] == [
        "Property 'label' is missing a type annotation",
        "Property 'color' is missing a type annotation",
    ]
    assert all(i.severity is Severity.ERROR for i in issues)
    assert (issues[1].line, issues[1].column) == (9, 2)


def test_state_variable_checks_are_independent():
    state = (
        StateVar("both", "", None),
        StateVar("untyped", "", "0"),
        StateVar("uninitialised", "i32", None),
        StateVar("fine", "bool", "true"),
    )

    issues = StateVariableRule().check(tree_with(state=state), "State.orbit")

    assert [i.message for i in issues] == [
        "State variable 'both' is missing type annotation",
        "State variable 'both' is missing initial value",
        "State variable 'untyped' is missing type annotation",
        "State variable 'uninitialised' is missing initial value",
    ]
    assert all(i.severity is Severity.WARNING for i in issues)


def test_renderer_rule_flags_gpu_feature_for_cpu_renderer():
    tree = parse_orbit_file(GPU_COMPONENT, "Scene.orbit")

    issues = RendererCompatibilityRule("skia").check(tree, "Scene.orbit")

    assert len(issues) == 1
    assert issues[0].severity is Severity.ERROR
    assert issues[0].rule == "renderer-compatibility"
    assert "'shader'" in issues[0].message
    assert (issues[0].line, issues[0].column) == (4, 5)


def test_renderer_rule_accepts_native_and_auto_renderers():
    tree = parse_orbit_file(GPU_COMPONENT, "Scene.orbit")

    assert RendererCompatibilityRule("webgpu").check(tree, "Scene.orbit") == []
    assert RendererCompatibilityRule("WebGPU").check(tree, "Scene.orbit") == []
    assert RendererCompatibilityRule("auto").check(tree, "Scene.orbit") == []


def test_renderer_rule_checks_attribute_markers_and_metadata():
    tree = parse_orbit_file(
        '<template><div renderer="skia"><img path-effect="dash"></div></template>', "Vector.orbit"
    )

    issues = RendererCompatibilityRule("webgpu").check(tree, "Vector.orbit")
    assert len(issues) == 2
    assert "'path-effect'" in issues[0].message
    assert "declares renderer 'skia'" in issues[1].message

    without_metadata = RendererCompatibilityRule("webgpu", check_metadata=False).check(tree, "Vector.orbit")
    assert len(without_metadata) == 1
    assert RendererCompatibilityRule("skia").check(tree, "Vector.orbit") == []


def test_rules_raise_rule_error_for_missing_sections():
    broken = OrbitFile(template=None, script=None)

    with pytest.raises(RuleError):
        NonEmptyTemplateRule().check(broken, "Broken.orbit")
    with pytest.raises(RuleError):
        PropTypeRule().check(broken, "Broken.orbit")
    with pytest.raises(RuleError):
        RendererCompatibilityRule("skia").check(broken, "Broken.orbit")


def test_rules_do_not_mutate_the_tree():
    tree = parse_orbit_file(GPU_COMPONENT, "Scene.orbit")
    snapshot = repr(tree)

    for rule in (
        NonEmptyTemplateRule(),
        PublicFunctionRule(),
        ComponentNamingRule(),
        PropTypeRule(),
        StateVariableRule(),
        RendererCompatibilityRule("skia"),
    ):
        rule.check(tree, "Scene.orbit")
        rule.check(tree, "Scene.orbit")

    assert repr(tree) == snapshot
