"""Tests for the translation usage scanner."""

from translations.scanner import ScanOptions, scan_source, scan_text


def test_every_literal_occurrence_is_recorded(repo):
    repo.source(
        "app/menu.py",
        "from i18n import t\n"
        "\n"
        "def render():\n"
        "    title = t('menu.title')\n"
        "    again = t('menu.title')\n"
        "    return t(\"menu.empty\")\n",
    )
    result = scan_source(repo.src, repo.root)
    assert result.keys == {"menu.title", "menu.empty"}
    assert result.file_count == 1
    locations = [(u.key, u.file, u.line, u.accessor) for u in result.usages]
    assert locations == [
        ("menu.title", "src/app/menu.py", 4, "t"),
        ("menu.title", "src/app/menu.py", 5, "t"),
        ("menu.empty", "src/app/menu.py", 6, "t"),
    ]


def test_attribute_accessor_and_concatenation(repo):
    repo.source("a.py", "i18n.translate('greet.' + 'hi')\n")
    result = scan_source(repo.src, repo.root)
    assert result.keys == {"greet.hi"}
    assert result.usages[0].accessor == "translate"


def test_unrecognised_calls_are_ignored(repo):
    repo.source("a.py", "print('menu.title')\nlogger.info('x.y')\n")
    result = scan_source(repo.src, repo.root)
    assert result.keys == set()
    assert result.dynamic_usages == []


def test_interpolated_key_is_dynamic_with_prefix(repo):
    repo.source("users.py", "def name(uid):\n    return t(f\"user.{uid}.name\")\n")
    result = scan_source(repo.src, repo.root)
    assert result.keys == set()
    assert len(result.dynamic_usages) == 1
    dyn = result.dynamic_usages[0]
    assert (dyn.file, dyn.line, dyn.accessor, dyn.reason) == ("src/users.py", 2, "t", "dynamic key")
    assert dyn.expression == 'f"user.{uid}.name"'
    assert dyn.prefix == "user."


def test_call_without_arguments_is_dynamic(repo):
    repo.source("a.py", "t()\n")
    result = scan_source(repo.src, repo.root)
    assert [d.reason for d in result.dynamic_usages] == ["no arguments"]
    assert result.dynamic_usages[0].expression == ""
    assert result.dynamic_usages[0].prefix == ""


def test_static_helper_takes_key_from_second_argument(repo):
    repo.source(
        "a.py",
        "Translator.t_locale(locale, 'menu.title')\n"
        "engine.t_locale(locale, 'menu.other')\n"
        "Translator.t_locale('menu.single')\n",
    )
    result = scan_source(repo.src, repo.root)
    assert "menu.title" in result.keys
    assert "menu.single" in result.keys
    # Not the static helper: first argument is the key (and it is dynamic).
    assert "menu.other" not in result.keys
    assert [d.expression for d in result.dynamic_usages] == ["locale"]


def test_key_keyword_argument(repo):
    repo.source("a.py", "t(key='menu.title', count=2)\n")
    result = scan_source(repo.src, repo.root)
    assert result.keys == {"menu.title"}


def test_nested_lookups_are_all_visited(repo):
    repo.source("a.py", "t('outer.key', label=t('inner.key'))\n")
    result = scan_source(repo.src, repo.root)
    assert result.keys == {"outer.key", "inner.key"}


def test_excluded_directories_and_files_are_skipped(repo):
    repo.source("app.py", "t('kept.key')\n")
    repo.source("build/gen.py", "t('build.key')\n")
    repo.source("Node_Modules/x.py", "t('node.key')\n")
    repo.source("pkg/__pycache__/y.py", "t('cache.key')\n")
    repo.source("pkg/translation_engine.py", "def t_locale(locale, key):\n    return t(key)\n")
    repo.source("notes.txt", "t('text.key')\n")
    result = scan_source(repo.src, repo.root)
    assert result.keys == {"kept.key"}
    assert result.dynamic_usages == []
    assert result.file_count == 1


def test_custom_options(repo):
    repo.source("a.py", "_('menu.title')\nt('menu.other')\n")
    options = ScanOptions(accessor_names=frozenset({"_"}))
    result = scan_source(repo.src, repo.root, options)
    assert result.keys == {"menu.title"}


def test_unparsable_file_is_skipped_and_reported(repo):
    repo.source("good.py", "t('good.key')\n")
    repo.source("bad.py", "t('bad.key'\n")
    result = scan_source(repo.src, repo.root)
    assert result.keys == {"good.key"}
    assert result.failed_files == ["src/bad.py"]
    assert result.file_count == 1


def test_deeply_nested_expression_is_skipped_and_reported(repo):
    repo.source("big.py", "SQL = " + " + ".join(["'x'"] * 3000) + "\n")
    repo.source("good.py", "t('good.key')\n")
    result = scan_source(repo.src, repo.root)
    assert result.keys == {"good.key"}
    assert result.failed_files == ["src/big.py"]
    assert result.file_count == 1


def test_missing_source_directory_yields_empty_result(tmp_path):
    result = scan_source(tmp_path / "nope", tmp_path)
    assert result.keys == set()
    assert result.file_count == 0


def test_results_are_in_sorted_walk_order(repo):
    repo.source("b.py", "t('b.key')\n")
    repo.source("a/z.py", "t('az.key')\n")
    repo.source("a.py", "t('a.key')\n")
    result = scan_source(repo.src, repo.root)
    assert [u.file for u in result.usages] == ["src/a.py", "src/b.py", "src/a/z.py"]


def test_scan_text_single_file():
    result = scan_text("t('x.y')\n", "mod.py")
    assert result.keys == {"x.y"}
    assert result.usages[0].file == "mod.py"
