"""Tests for extraction, merging and token conversion."""

import pytest
from pathlib import Path

from graph.model import SourceFile
from graph.order import Cycle
from style.extractor import extract, extract_fragment
from style.merger import merge
from style.model import Mixin, StyleModel, Variable
from style.tokens import TokenCategory, classify, convert, to_token_key


BASE = Path("/repo/base.less")
THEME = Path("/repo/theme.less")


def source(path, content=None):
    source_file = SourceFile(path=path, relative_path=path.name)
    if content is not None:
        source_file.set_content(content)
    return source_file


def model_of(*pairs):
    model = StyleModel()
    for i, (name, value) in enumerate(pairs):
        model.apply_variable(Variable(file=BASE, name=name, value=value, order=i))
    model.seal()
    return model


class TestExtractor:
    """Tests for per-file extraction."""

    def test_variables_and_mixins_in_order(self):
        """Declarations keep their file order across both kinds."""
        content = (
            "@primary: #112233;\n"
            ".rounded(@r) { border-radius: @r; }\n"
            "@gap:   8px  ;\n"
        )

        fragment = extract_fragment(BASE, content)

        assert [(v.name, v.value, v.order) for v in fragment.variables] == [
            ("primary", "#112233", 0),
            ("gap", "8px", 2),
        ]
        assert [(m.name, m.params, m.order) for m in fragment.mixins] == [("rounded", "@r", 1)]
        assert fragment.is_clean

    def test_values_not_evaluated(self):
        """Expressions and references are kept as written."""
        fragment = extract_fragment(BASE, "@dark: darken(@primary, 10%);")

        assert fragment.variables[0].value == "darken(@primary, 10%)"

    def test_malformed_is_partial(self):
        """Readable declarations survive next to unreadable ones."""
        fragment = extract_fragment(BASE, "@a: 1;\n@broken: ;\n@b: 2;")

        assert [v.name for v in fragment.variables] == ["a", "b"]
        assert len(fragment.malformed) == 1
        assert fragment.malformed[0].line == 2
        assert not fragment.is_clean

    def test_extract_requires_content(self):
        """A file that was never read cannot be extracted."""
        with pytest.raises(ValueError):
            extract(source(BASE))

    def test_mixin_signature(self):
        """The signature reproduces the guard."""
        mixin = Mixin(file=BASE, name="m", params="@a", body="", guard="(@a > 0)")

        assert mixin.signature == ".m(@a) when (@a > 0)"


class TestMerger:
    """Tests for merging fragments along the resolution order."""

    def test_later_file_overrides(self):
        """The importer's value replaces the imported one and keeps a shadow entry."""
        base, theme = source(BASE), source(THEME)
        fragments = {
            BASE: extract_fragment(BASE, "@color-primary: #112233;\n@spacing-base: 4px;"),
            THEME: extract_fragment(THEME, "@color-primary: #445566;"),
        }

        model = merge([base, theme], fragments)

        entry = model.get("color-primary")
        assert entry.value == "#445566"
        assert entry.file == THEME
        assert entry.shadowed_by == [(BASE, "#112233")]
        assert model.value_of("spacing-base") == "4px"
        assert list(model.variables) == ["color-primary", "spacing-base"]

    def test_last_declaration_in_file_wins(self):
        """Inside one file the later declaration wins."""
        fragments = {BASE: extract_fragment(BASE, "@x: 1;\n@x: 2;")}

        model = merge([source(BASE)], fragments)

        assert model.value_of("x") == "2"
        assert model.get("x").shadowed_by == [(BASE, "1")]

    def test_mixins_later_wins(self):
        """Mixins follow the same rule as variables."""
        fragments = {
            BASE: extract_fragment(BASE, ".m(@a) { }"),
            THEME: extract_fragment(THEME, ".m(@a; @b) { }"),
        }

        model = merge([source(BASE), source(THEME)], fragments)

        assert model.mixins["m"].mixin.file == THEME
        assert model.mixins["m"].shadowed_by == [(BASE, ".m(@a)")]

    def test_cycle_members_keep_local_values(self):
        """Inside a cycle the first member's declarations are not replaced."""
        base, theme = source(BASE), source(THEME)
        fragments = {
            BASE: extract_fragment(BASE, "@x: 1;\n.m(@a) { }"),
            THEME: extract_fragment(THEME, "@x: 2;\n@y: 3;\n.m(@b) { }"),
        }

        model = merge([base, theme], fragments, [Cycle(members=[base, theme])])

        assert model.value_of("x") == "1"
        assert model.get("x").shadowed_by == []
        assert model.value_of("y") == "3"
        assert model.mixins["m"].mixin.file == BASE
        assert [(c.name, c.ignored_file, c.ignored_value, c.is_mixin) for c in model.conflicts] == [
            ("x", THEME, "2", False),
            ("m", THEME, ".m(@b)", True),
        ]

    def test_self_import_keeps_file_order(self):
        """A one-file cycle still lets its own later declaration win."""
        base = source(BASE)
        fragments = {BASE: extract_fragment(BASE, "@x: 1;\n@x: 2;")}

        model = merge([base], fragments, [Cycle(members=[base])])

        assert model.value_of("x") == "2"
        assert model.conflicts == []

    def test_files_without_fragment_skipped(self):
        """Files with no extracted fragment contribute nothing."""
        model = merge([source(BASE)], {})

        assert len(model) == 0

    def test_model_sealed(self):
        """The merged model refuses further writes."""
        model = merge([source(BASE)], {BASE: extract_fragment(BASE, "@x: 1;")})

        assert model.sealed
        with pytest.raises(RuntimeError):
            model.apply_variable(Variable(file=BASE, name="y", value="2", order=0))


class TestTokens:
    """Tests for token classification and conversion."""

    @pytest.mark.parametrize("name,category", [
        ("border-radius-lg", TokenCategory.BORDER_RADIUS),
        ("color-primary", TokenCategory.COLORS),
        ("primaryColor", TokenCategory.COLORS),
        ("bg-muted", TokenCategory.COLORS),
        ("text-muted", TokenCategory.COLORS),
        ("border-width", TokenCategory.COLORS),
        ("spacing-base", TokenCategory.SPACING),
        ("grid-gap", TokenCategory.SPACING),
        ("font-size-base", TokenCategory.FONT_SIZE),
        ("icon-size", TokenCategory.FONT_SIZE),
        ("font-family-sans", TokenCategory.FONT_FAMILY),
        ("z-index-modal", TokenCategory.OTHER),
    ])
    def test_classify(self, name, category):
        """Rules apply in fixed order; unmatched names are OTHER."""
        assert classify(name) is category

    @pytest.mark.parametrize("name,key", [
        ("primaryColor", "primary-color"),
        ("primary_color", "primary-color"),
        ("primary-color", "primary-color"),
        ("Font.Size", "font-size"),
        ("@spacing--lg", "spacing-lg"),
    ])
    def test_token_key(self, name, key):
        """Names normalize to kebab-case keys."""
        assert to_token_key(name) == key

    def test_every_variable_in_one_group(self):
        """Conversion is total and groups come in fixed order."""
        model = model_of(("color-primary", "#fff"), ("gap", "4px"), ("z-index", "10"))

        groups = convert(model)

        assert [g.category for g in groups] == list(TokenCategory)
        assert sum(len(g) for g in groups) == len(model)
        by_category = {g.category: g for g in groups}
        assert by_category[TokenCategory.COLORS].as_dict() == {"color-primary": "#fff"}
        assert by_category[TokenCategory.OTHER].as_dict() == {"z-index": "10"}
        assert len(by_category[TokenCategory.FONT_FAMILY]) == 0

    def test_key_collision_later_wins(self):
        """Two names with the same key keep the later value."""
        model = model_of(("primary-color", "#111"), ("primaryColor", "#222"))

        colors = convert(model)[list(TokenCategory).index(TokenCategory.COLORS)]

        assert len(colors) == 2
        assert colors.as_dict() == {"primary-color": "#222"}

    def test_convert_leaves_model_untouched(self):
        """Conversion only reads the model."""
        model = model_of(("color-primary", "#fff"))

        convert(model)

        assert model.value_of("color-primary") == "#fff"
        assert len(model) == 1
