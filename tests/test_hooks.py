"""Tests for post-generation hooks."""

from gql_mockgen.core.hooks import AddHeaderHook, HookRunner, PostGenerateHook


class TestAddHeaderHook:
    """Tests for AddHeaderHook."""

    def test_adds_comment_header(self):
        hook = AddHeaderHook("Auto-generated")
        result = hook.post_generate("mocks.ts", "type A = {};")
        assert result == "// Auto-generated\n\ntype A = {};"

    def test_keeps_existing_comment_markers(self):
        hook = AddHeaderHook("// eslint-disable\nDo not edit")
        result = hook.post_generate("mocks.ts", "code")
        assert result == "// eslint-disable\n// Do not edit\n\ncode"

    def test_handles_header_with_newline(self):
        hook = AddHeaderHook("Header\n")
        result = hook.post_generate("mocks.ts", "code")
        # Should not double-up newlines
        assert result == "// Header\n\ncode"

    def test_blank_lines(self):
        hook = AddHeaderHook("Title\n\nBody")
        assert hook.post_generate("-", "code") == "// Title\n//\n// Body\n\ncode"

    def test_is_post_generate_hook(self):
        assert isinstance(AddHeaderHook("x"), PostGenerateHook)


class TestHookRunner:
    """Tests for HookRunner."""

    def test_no_hooks(self):
        assert HookRunner().run_post_hooks("mocks.ts", "code") == "code"

    def test_hooks_run_in_order(self):
        class Wrap:
            def __init__(self, marker):
                self.marker = marker

            def post_generate(self, location, content):
                return f"{self.marker}({content})"

        runner = HookRunner()
        runner.add_post_hook(Wrap("a"))
        runner.add_post_hook(Wrap("b"))
        assert runner.run_post_hooks("mocks.ts", "x") == "b(a(x))"

    def test_hook_receives_location(self):
        seen = []

        class Record:
            def post_generate(self, location, content):
                seen.append(location)
                return content

        runner = HookRunner()
        runner.add_post_hook(Record())
        runner.run_post_hooks("src/mocks.ts", "code")
        assert seen == ["src/mocks.ts"]
