"""Tests for markdown rendering."""

from __future__ import annotations

from storydoc.models import (
    DeclarationKind,
    DeclarationRecord,
    ExtractionWarning,
    FieldDescriptor,
    HttpMethod,
    RouteRecord,
    Table,
)
from storydoc.renderer import (
    render_component_document,
    render_route_document,
    render_table,
    to_markdown,
)


def _component(name: str, *fields: FieldDescriptor, path: str = "x.tsx") -> DeclarationRecord:
    return DeclarationRecord(name=name, kind=DeclarationKind.component, fields=list(fields), source_path=path)


class TestComponentDocument:
    def test_exact_output(self):
        button = _component(
            "Button",
            FieldDescriptor(name="text", type_expression="string", required=True),
            FieldDescriptor(name="onClick", type_expression="() => void", required=False),
        )
        divider = _component("Divider")
        doc = render_component_document([button, divider])
        assert doc.to_markdown() == (
            "# Components\n\n"
            "## Button\n\n"
            "### Props\n\n"
            "| Name | Type | Required | Description |\n"
            "|------|------|----------|-------------|\n"
            "| text | `string` | true | |\n"
            "| onClick | `() => void` | false | |\n"
            "\n"
            "## Divider\n\n"
        )

    def test_empty(self):
        assert render_component_document([]).to_markdown() == "# Components\n\n"

    def test_empty_type_expression(self):
        doc = render_component_document([_component("Tag", FieldDescriptor(name="label"))])
        assert "| label | `` | true | |\n" in doc.to_markdown()

    def test_blank_names_dropped(self):
        doc = render_component_document([_component(""), _component("Card")])
        assert [s.heading for s in doc.sections] == ["Components", "Card"]

    def test_duplicate_names_kept_once_with_warning(self):
        doc = render_component_document([_component("Card", path="a.tsx"), _component("Card", path="b.tsx")])
        assert doc.to_markdown().count("## Card") == 1
        assert [w.path for w in doc.warnings] == ["b.tsx"]
        assert "a.tsx" in doc.warnings[0].message

    def test_custom_title(self):
        assert render_component_document([], title="UI Kit").to_markdown() == "# UI Kit\n\n"

    def test_warnings_attached(self):
        warning = ExtractionWarning(path="Broken.tsx", message="syntax error")
        doc = render_component_document([], warnings=[warning])
        assert doc.warnings == [warning]


class TestRouteDocument:
    def test_exact_output(self):
        routes = [
            RouteRecord(url_path="/users", methods=[HttpMethod.GET, HttpMethod.POST], source_path="a"),
            RouteRecord(url_path="/users/:id", methods=[], source_path="b"),
        ]
        assert render_route_document(routes).to_markdown() == (
            "# API Routes\n\n"
            "| Route | Methods | Description |\n"
            "|-------|---------|-------------|\n"
            "| `/users` | GET, POST | |\n"
            "| `/users/:id` |  | |\n"
        )

    def test_empty(self):
        assert render_route_document([]).to_markdown() == (
            "# API Routes\n\n"
            "| Route | Methods | Description |\n"
            "|-------|---------|-------------|\n"
        )

    def test_row_order_preserved(self):
        routes = [RouteRecord(url_path=p, source_path=p) for p in ("/b", "/a", "/c")]
        text = render_route_document(routes).to_markdown()
        assert text.index("/b") < text.index("/a") < text.index("/c")


class TestMarkdown:
    def test_separator_widths_follow_headers(self):
        text = render_table(Table(columns=["Name"]))
        assert text == "| Name | Description |\n|------|-------------|\n"

    def test_spaced_table(self):
        assert render_table(Table(columns=["A"], rows=[["x"]], spaced=True)).endswith("| x | |\n\n")

    def test_deterministic(self):
        records = [_component("Card", FieldDescriptor(name="title", type_expression="string"))]
        assert to_markdown(render_component_document(records)) == to_markdown(render_component_document(records))
