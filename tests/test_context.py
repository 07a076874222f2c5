from layoutsmith.core.context import ElementModelStructureHandler, LocalScope, TemplateContext
from layoutsmith.core.loader import InMemoryTemplateRepository, TemplateModelFinder
from layoutsmith.core.model import TemplateData
from layoutsmith.fragments import FragmentCollection, FragmentDefinition


def _collection(*names: str) -> FragmentCollection:
    return FragmentCollection({name: FragmentDefinition(name, ()) for name in names})


def test_local_variables_shadow_render_variables() -> None:
    context = TemplateContext(
        TemplateData("page"),
        TemplateModelFinder(InMemoryTemplateRepository()),
        base_variables={"title": "base", "user": "ada"},
    )
    context.scope.set_variable("title", "local")
    assert context.variables["title"] == "local"
    assert context.variables["user"] == "ada"


def test_fragment_collections_merge_or_replace() -> None:
    scope = LocalScope()
    scope.set_fragment_collection(_collection("a", "b"))
    scope.set_fragment_collection(_collection("b", "c"), merge=True)
    assert scope.fragments.names() == ["a", "b", "c"]
    scope.set_fragment_collection(_collection("z"), merge=False)
    assert scope.fragments.names() == ["z"]


def test_apply_publishes_and_resets_handler() -> None:
    finder = TemplateModelFinder(InMemoryTemplateRepository())
    context = TemplateContext(TemplateData("page"), finder)
    handler = ElementModelStructureHandler()
    handler.set_template_data(TemplateData("layout"))
    handler.set_local_fragment_collection(_collection("content"))
    handler.set_local_variable("section", "news")

    context.apply(handler)

    assert context.template_data.template == "layout"
    assert context.scope.fragments.names() == ["content"]
    assert context.scope.variables == {"section": "news"}
    assert handler.template_data is None
    assert handler.local_variables == {}
