"""Post-generation hooks applied to generated files before they are written.

Example usage:
    from gql_mockgen.core.hooks import AddHeaderHook, HookRunner

    runner = HookRunner()
    runner.add_post_hook(AddHeaderHook("Generated by gql-mockgen. Do not edit."))
    content = runner.run_post_hooks("src/mocks.ts", content)
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class PostGenerateHook(Protocol):
    """Protocol for post-generation hooks.

    Post-generation hooks receive the generated code for each output and
    can transform it before it's written.

    Example:
        class AddEslintDisable(PostGenerateHook):
            def post_generate(self, location: str, content: str) -> str:
                return "/* eslint-disable */\\n" + content
    """

    def post_generate(self, location: str, content: str) -> str:
        """Called after generation for each output.

        Args:
            location: Where the output is written (a path, or "-" for stdout)
            content: The generated code

        Returns:
            The (possibly transformed) code to write
        """
        ...


class AddHeaderHook:
    """Prepends a ``//`` comment header to every output.

    Example:
        hook = AddHeaderHook("Generated file.\\nDo not edit.")
    """

    def __init__(self, header: str):
        self.header = header

    def post_generate(self, _location: str, content: str) -> str:
        lines = [
            line if line.startswith("//") else f"// {line}".rstrip()
            for line in self.header.rstrip("\n").splitlines()
        ]
        return "\n".join(lines) + "\n\n" + content


class HookRunner:
    """Runs post-generation hooks in order."""

    def __init__(self):
        self.post_hooks: list[PostGenerateHook] = []

    def add_post_hook(self, hook: PostGenerateHook):
        self.post_hooks.append(hook)

    def run_post_hooks(self, location: str, content: str) -> str:
        for hook in self.post_hooks:
            content = hook.post_generate(location, content)
        return content
