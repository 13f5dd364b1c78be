import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from cv_analyzer.core.errors import UnparsableReply  # noqa: E402
from cv_analyzer.services.recovery import (  # noqa: E402
    RAW_PREVIEW_CHARS,
    find_balanced_span,
    normalize_json_text,
    recover_json,
    strip_fences,
)


class StripFencesTests(unittest.TestCase):
    def test_strips_json_fence_and_bom(self):
        raw = '\ufeff  ```json\n{"a": 1}\n```  '
        self.assertEqual(strip_fences(raw), '{"a": 1}')

    def test_strips_bare_fence(self):
        self.assertEqual(strip_fences('```\n[1, 2]\n```'), "[1, 2]")

    def test_leaves_unfenced_text_alone(self):
        self.assertEqual(strip_fences('  {"a": "```"}  '), '{"a": "```"}')


class NormalizeJsonTextTests(unittest.TestCase):
    def test_replaces_typographic_quotes(self):
        self.assertEqual(normalize_json_text("{“a”: „b”}"), '{"a": "b"}')

    def test_removes_trailing_commas(self):
        self.assertEqual(normalize_json_text('{"a": [1, 2,], }'), '{"a": [1, 2] }')

    def test_removes_comments_outside_strings_only(self):
        text = '{"url": "https://example.com/a", // note\n "b": /* inline */ 2}'
        self.assertEqual(normalize_json_text(text), '{"url": "https://example.com/a", \n "b":  2}')

    def test_keeps_comma_brace_sequences_inside_strings(self):
        text = '{"a": "x, }"}'
        self.assertEqual(normalize_json_text(text), text)


class FindBalancedSpanTests(unittest.TestCase):
    def test_ignores_braces_inside_strings(self):
        text = 'Result: {"a": "}{", "b": [1, {"c": "]"}]} trailing } brace'
        self.assertEqual(find_balanced_span(text), '{"a": "}{", "b": [1, {"c": "]"}]}')

    def test_respects_escaped_quotes(self):
        text = 'x {"a": "say \\"}\\" now"} y'
        self.assertEqual(find_balanced_span(text), '{"a": "say \\"}\\" now"}')

    def test_returns_none_without_opening_bracket(self):
        self.assertIsNone(find_balanced_span("no json here"))

    def test_returns_none_when_unbalanced(self):
        self.assertIsNone(find_balanced_span('{"a": [1, 2'))


class RecoverJsonTests(unittest.TestCase):
    def test_fenced_polish_reply(self):
        raw = (
            '```json\n{"podsumowanie":"ok","dopasowanie":'
            '{"mocne_strony":["a","b"],"obszary_do_poprawy":["c"]}}\n```'
        )
        value = recover_json(raw)
        self.assertEqual(value["podsumowanie"], "ok")
        self.assertEqual(len(value["dopasowanie"]["mocne_strony"]), 2)
        self.assertEqual(len(value["dopasowanie"]["obszary_do_poprawy"]), 1)

    def test_valid_json_with_typographic_quotes_in_values_is_kept(self):
        raw = '{"podsumowanie": "Kandydat z „dużym” doświadczeniem"}'
        self.assertEqual(recover_json(raw)["podsumowanie"], "Kandydat z „dużym” doświadczeniem")

    def test_typographic_quotes_in_values_survive_trailing_comma_cleanup(self):
        raw = (
            '{"podsumowanie": "Kandydat z „dużym” doświadczeniem", '
            '"dopasowanie": {"mocne_strony": ["a",], "obszary_do_poprawy": []},}'
        )
        value = recover_json(raw)
        self.assertEqual(value["podsumowanie"], "Kandydat z „dużym” doświadczeniem")
        self.assertEqual(value["dopasowanie"]["mocne_strony"], ["a"])

    def test_typographic_quotes_in_values_survive_comment_cleanup(self):
        raw = '{"podsumowanie": "Projekt „Alfa”", // uwaga modelu\n "pytania": {}}'
        self.assertEqual(recover_json(raw), {"podsumowanie": "Projekt „Alfa”", "pytania": {}})

    def test_normalization_pass_fixes_smart_quotes_and_trailing_commas(self):
        raw = "{“podsumowanie”: “ok”, “lista”: [1, 2,],}"
        self.assertEqual(recover_json(raw), {"podsumowanie": "ok", "lista": [1, 2]})

    def test_prose_wrapped_object_with_stray_braces(self):
        raw = (
            "Oto analiza {wersja robocza}. "
            '{"podsumowanie": "Wynik {ważny}", "dopasowanie": {"mocne_strony": ["x"]}} '
            "Daj znać, jeśli potrzebujesz więcej }"
        )
        value = recover_json(raw)
        self.assertEqual(value["podsumowanie"], "Wynik {ważny}")

    def test_balanced_span_used_when_prose_contains_later_braces(self):
        raw = 'Here you go: {"a": 1} and also see {note}'
        self.assertEqual(recover_json(raw), {"a": 1})

    def test_skips_bracketed_prose_before_the_payload(self):
        raw = 'Lista [uwaga] potem {"a": 1}'
        self.assertEqual(recover_json(raw), {"a": 1})

    def test_falls_back_to_naive_boundaries(self):
        # Typographic quotes hide the brace inside the value from the bracket walk.
        raw = "Wynik: {“a”: “}”, “b”: 2} koniec"
        self.assertEqual(recover_json(raw), {"a": "}", "b": 2})

    def test_top_level_array(self):
        self.assertEqual(recover_json("Pytania: [\"a\", \"b\",]"), ["a", "b"])

    def test_no_brackets_raises_with_raw_preview(self):
        raw = "Przepraszam, nie mogę pomóc. " * 200
        with self.assertRaises(UnparsableReply) as ctx:
            recover_json(raw)
        self.assertEqual(ctx.exception.raw_text, raw[:RAW_PREVIEW_CHARS])

    def test_unparsable_braces_raise(self):
        with self.assertRaises(UnparsableReply):
            recover_json("{to nie jest json}")


if __name__ == "__main__":
    unittest.main()
