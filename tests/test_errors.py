from hdlalign.errors import (
    AlignConfigError,
    HdlAlignError,
    InstanceTemplateError,
    TreeGenerationError,
    TreeLoadError,
)


def test_error_format_includes_metadata() -> None:
    err = TreeLoadError(
        "Malformed syntax tree",
        path="rtl/top.v.ast.json",
        line=4,
        column=2,
        hint="Regenerate the tree.",
    )
    formatted = err.format()
    assert "Malformed syntax tree" in formatted
    assert "rtl/top.v.ast.json:4:2" in formatted
    assert "TREE_LOAD" in formatted
    assert "Regenerate the tree" in formatted


def test_error_format_handles_missing_location() -> None:
    err = HdlAlignError("Unexpected node")
    formatted = err.format()
    assert formatted.startswith("Unexpected node")
    assert "(" not in formatted


def test_error_codes_per_subclass() -> None:
    assert TreeGenerationError("x").code == "TREE_GENERATION"
    assert isinstance(TreeGenerationError("x"), TreeLoadError)
    assert AlignConfigError("x").code == "ALIGN_CONFIG"
    assert InstanceTemplateError("x").code == "INSTANCE_TEMPLATE"


def test_explicit_code_overrides_class_default() -> None:
    err = TreeLoadError("gone", path="top.json", code="TREE_MISSING")
    assert err.format() == "gone (top.json; TREE_MISSING)"
