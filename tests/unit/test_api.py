"""Unit tests for the caller-facing functions."""

import pytest

from restex import api
from restex.contexts.templating.exceptions import TemplateNotRegisteredError
from restex.contexts.templating.template_registry import TemplateRegistry
from restex.contexts.templating.transforms import TransformRegistry

from conftest import FakeToolchain, make_template


@pytest.fixture
def registry():
    transforms = TransformRegistry({"Custom_CV": str.upper})
    registry = TemplateRegistry(
        [make_template(template_id="Custom_CV"), make_template(template_id="Plain_CV")],
        transforms=transforms,
    )
    api.set_registry(registry)
    yield registry
    api.set_registry(None)


@pytest.mark.unit
def test_list_and_get(registry):
    assert [t.id for t in api.list_templates()] == ["Custom_CV", "Plain_CV"]
    assert api.get_template("Plain_CV").id == "Plain_CV"

    with pytest.raises(TemplateNotRegisteredError):
        api.get_template("Missing_CV")


@pytest.mark.unit
def test_transform_uses_registry_transforms(registry):
    template = api.get_template("Custom_CV")

    assert api.transform_content(template, "abc") == "ABC"
    assert api.transform_content(api.get_template("Plain_CV"), "abc") == "abc"


@pytest.mark.unit
def test_validate_template(registry):
    template = make_template(custom_packages=("paracol",))

    result = api.validate_template(template, FakeToolchain(packages=["paracol"]))

    assert result.is_valid


@pytest.mark.unit
def test_default_registry_loads_catalog():
    api.set_registry(None)
    try:
        assert api.get_registry().is_registered("Default_Resume")
        assert api.get_registry() is api.get_registry()
    finally:
        api.set_registry(None)


@pytest.mark.unit
def test_compile_preview_passes_registry_transforms(registry, monkeypatch):
    calls = []
    monkeypatch.setattr(api, "_compile_preview", lambda template, content, **kwargs: calls.append(kwargs))

    api.compile_preview(api.get_template("Custom_CV"), "abc", use_cache=False)

    assert calls[0]["transforms"] is registry.transforms
    assert calls[0]["cache"] is None
